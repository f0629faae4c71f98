from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail
from flask import current_app
from markupsafe import escape

def send_decision(to_email, subject, html):
    sg = SendGridAPIClient(api_key=current_app.config['SENDGRID_API_KEY'])
    message = Mail(from_email=(current_app.config['MAIL_FROM'], current_app.config['MAIL_FROM_NAME']),
                   to_emails=to_email,
                   subject=subject,
                   html_content=html)
    resp = sg.send(message)
    headers = getattr(resp, 'headers', None) or {}
    return resp.status_code, headers.get('X-Message-Id')


def rejection_body(candidate_name, job_title):
    return (
        f"<p>Bonjour {escape(candidate_name)},</p>"
        f"<p>Nous vous remercions de l'intérêt porté au poste <strong>{escape(job_title)}</strong>. "
        "Après étude de votre candidature, nous ne sommes pas en mesure d'y donner une suite favorable.</p>"
        "<p>Cordialement,<br>L'équipe RH</p>"
    )


def offer_body(candidate_name, job_title):
    return (
        f"<p>Bonjour {escape(candidate_name)},</p>"
        f"<p>Nous avons le plaisir de vous proposer le poste <strong>{escape(job_title)}</strong>. "
        "Notre équipe RH vous contactera pour les prochaines étapes.</p>"
        "<p>Cordialement,<br>L'équipe RH</p>"
    )
