import os
from dotenv import load_dotenv
load_dotenv()


def _float_list(raw, default):
    if not raw:
        return default
    try:
        return tuple(float(x) for x in raw.split(",") if x.strip())
    except ValueError:
        return default


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///hrms.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY")
    MAIL_FROM = os.getenv("MAIL_FROM", "noreply@example.com")
    MAIL_FROM_NAME = os.getenv("MAIL_FROM_NAME", "HR Team")

    # skills, experience, interview, rating
    SCORING_WEIGHTS = _float_list(os.getenv("SCORING_WEIGHTS"), (0.35, 0.25, 0.25, 0.15))
    INTERVIEW_RATING_SCALE = float(os.getenv("INTERVIEW_RATING_SCALE", "5"))
    MANAGER_RATING_SCALE = float(os.getenv("MANAGER_RATING_SCALE", "5"))
    NAV_GROUP_ORDER = ("Self", "Team", "Talent", "Finance", "System")


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    WTF_CSRF_ENABLED = False
    REDIS_URL = None
    SENDGRID_API_KEY = "test-key"
