from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from redis import Redis
from rq import Queue
from flask import current_app

# kwargs understood by Queue.enqueue but not by the job function itself
RQ_KEYS = {'job_timeout', 'timeout', 'at_front', 'depends_on', 'result_ttl', 'ttl', 'meta', 'description', 'job_id'}


class SyncJob:
    """Stand-in for an rq Job when the function ran in-process."""

    def __init__(self, result):
        self.id = None
        self.result = result
        self.is_finished = True


class RQWrapper:
    def __init__(self):
        self.redis = None
        self.queue = None

    def init_app(self, app):
        url = app.config.get("REDIS_URL")
        if not url:
            app.logger.info('REDIS_URL not set, background jobs run synchronously')
            return
        try:
            self.redis = Redis.from_url(url)
            self.redis.ping()
            self.queue = Queue("default", connection=self.redis)
        except Exception:
            # no redis server on dev machines; jobs run in the request instead
            app.logger.exception('Redis/RQ init failed, falling back to sync execution')
            self.redis = None
            self.queue = None

    def _run_sync(self, args, kwargs):
        func = args[0] if args else None
        if not func:
            return None
        safe_kwargs = {k: v for k, v in kwargs.items() if k not in RQ_KEYS}
        return SyncJob(func(*args[1:], **safe_kwargs))

    def enqueue(self, *args, **kwargs):
        if not self.queue:
            return self._run_sync(args, kwargs)
        try:
            return self.queue.enqueue(*args, **kwargs)
        except Exception:
            current_app.logger.exception('RQ enqueue failed, falling back to sync execution')
            return self._run_sync(args, kwargs)


db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()
rq = RQWrapper()
