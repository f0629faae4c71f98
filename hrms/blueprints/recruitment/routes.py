import csv
from datetime import datetime
from io import BytesIO, StringIO

from flask import current_app, jsonify, send_file
from flask_login import login_required, current_user
from . import bp
from .forms import ApplicationForm, InterviewForm, JobOfferForm, JobOfferUpdateForm, RejectForm, StageForm
from ...extensions import db, rq
from ...models.application import Application
from ...models.candidate import Candidate
from ...models.interview import Interview
from ...models.job_offer import JobOffer
from ...jobs.notify import notify_decision
from ...jobs.scoring import current_ranking, recalculate_job_ranking
from ...services.mail import offer_body, rejection_body
from ...services.navigation import HR_UP
from ...services.scoring import RANKING_COLUMNS, ranking_rows
from ...utils.decorators import permission_required, recruiter_required
from ...utils.forms import parse_json_field, request_formdata, split_csv, validation_error

recruitment_viewer = permission_required("recruitment.view", "recruitment.manage", roles=HR_UP)


def _job_payload(job):
    return {
        "id": job.id,
        "title": job.title,
        "department": job.department,
        "status": job.status,
        "description": job.description,
        "required_skills": job.required_skills or [],
        "min_experience": job.min_experience,
        "scoring_criteria": job.scoring_criteria,
        "ranked_at": job.ranked_at.isoformat() if job.ranked_at else None,
        "applications": len(job.applications),
    }


def _application_payload(a):
    return {
        "id": a.id,
        "candidate_id": a.candidate_id,
        "job_offer_id": a.job_offer_id,
        "name": a.candidate.name,
        "email": a.candidate.email,
        "stage": a.stage,
        "submitted_at": a.submitted_at.isoformat() if a.submitted_at else None,
        "score": a.score,
        "score_breakdown": a.score_breakdown,
        "rank": a.rank,
    }


def _field_error(name, message, status=422):
    return jsonify({"error": "validation_failed", "details": {name: [message]}}), status


def _get_job(job_id):
    return JobOffer.query.filter_by(id=job_id, org_id=current_user.org_id).first_or_404()


def _get_application(app_id):
    return Application.query.filter_by(id=app_id, org_id=current_user.org_id).first_or_404()


def _apply_job(form, job, present):
    for name in ("title", "department", "status", "description", "min_experience"):
        if name in present:
            setattr(job, name, getattr(form, name).data)
    if "required_skills" in present:
        job.required_skills = split_csv(form.required_skills.data)
    if "scoring_criteria" in present:
        job.scoring_criteria = parse_json_field(form.scoring_criteria.data)


@bp.get("/jobs")
@login_required
@recruitment_viewer
def list_jobs():
    jobs = JobOffer.query.filter_by(org_id=current_user.org_id).order_by(JobOffer.id.desc()).all()
    return jsonify({"jobs": [_job_payload(j) for j in jobs]})


@bp.post("/jobs")
@login_required
@recruiter_required
def create_job():
    data = request_formdata()
    form = JobOfferForm(formdata=data)
    if not form.validate():
        return validation_error(form)
    job = JobOffer(org_id=current_user.org_id, status="draft")
    _apply_job(form, job, set(data.keys()))
    db.session.add(job)
    db.session.commit()
    return jsonify(_job_payload(job)), 201


@bp.get("/jobs/<int:job_id>")
@login_required
@recruitment_viewer
def job_detail(job_id):
    job = _get_job(job_id)
    payload = _job_payload(job)
    payload["applications"] = [_application_payload(a) for a in job.applications]
    return jsonify(payload)


@bp.patch("/jobs/<int:job_id>")
@login_required
@recruiter_required
def update_job(job_id):
    job = _get_job(job_id)
    data = request_formdata()
    form = JobOfferUpdateForm(formdata=data)
    if not form.validate():
        return validation_error(form)
    if "title" in data and not form.title.data:
        return _field_error("title", "Intitulé requis")
    _apply_job(form, job, set(data.keys()))
    db.session.commit()
    return jsonify(_job_payload(job))


@bp.post("/jobs/<int:job_id>/applications")
@login_required
@recruiter_required
def create_application(job_id):
    job = _get_job(job_id)
    data = request_formdata()
    form = ApplicationForm(formdata=data)
    if not form.validate():
        return validation_error(form)
    scale = float(current_app.config.get('MANAGER_RATING_SCALE', 5))
    if form.rating.data is not None and form.rating.data > scale:
        return _field_error("rating", f"Note maximale: {scale:g}")

    cand = None
    if form.email.data:
        cand = Candidate.query.filter_by(org_id=current_user.org_id, email=form.email.data).first()
    if cand is None:
        cand = Candidate(org_id=current_user.org_id, email=form.email.data or None)
        db.session.add(cand)
    cand.first_name = form.first_name.data
    cand.last_name = form.last_name.data
    if "phone" in data:
        cand.phone = form.phone.data or None
    if "skills" in data:
        cand.skills = split_csv(form.skills.data)
    if "years_experience" in data:
        cand.years_experience = form.years_experience.data
    if "rating" in data:
        cand.rating = form.rating.data
    db.session.flush()

    if Application.query.filter_by(candidate_id=cand.id, job_offer_id=job.id).first():
        db.session.rollback()
        return jsonify({"error": "already_applied"}), 409

    app_row = Application(org_id=current_user.org_id, candidate_id=cand.id, job_offer_id=job.id,
                          stage="submitted", submitted_at=form.submitted_at.data or datetime.utcnow())
    db.session.add(app_row)
    db.session.commit()
    return jsonify(_application_payload(app_row)), 201


@bp.post("/applications/<int:app_id>/interviews")
@login_required
@recruiter_required
def create_interview(app_id):
    app_row = _get_application(app_id)
    form = InterviewForm(formdata=request_formdata())
    if not form.validate():
        return validation_error(form)
    scale = float(current_app.config.get('INTERVIEW_RATING_SCALE', 5))
    if form.rating.data is not None and form.rating.data > scale:
        return _field_error("rating", f"Note maximale: {scale:g}")

    iv = Interview(org_id=current_user.org_id, application_id=app_row.id,
                   scheduled_at=form.scheduled_at.data, status=form.status.data,
                   rating=form.rating.data, comment=form.comment.data or None,
                   interviewer_id=current_user.id)
    db.session.add(iv)
    if app_row.stage in ("submitted", "screening"):
        app_row.stage = "interviewing"
    db.session.commit()
    return jsonify({"id": iv.id, "application_id": app_row.id, "status": iv.status,
                    "rating": iv.rating, "stage": app_row.stage}), 201


def _queue_decision_mail(app_row, subject, body):
    if not app_row.candidate.email:
        return None
    try:
        job = rq.enqueue(notify_decision, current_user.org_id, app_row.id, app_row.candidate.email, subject, body)
    except Exception:
        # the decision itself is committed; a mail failure must not undo it
        current_app.logger.exception("Failed to send decision email for application %s", app_row.id)
        return None
    return getattr(job, "id", None)


@bp.patch("/applications/<int:app_id>/stage")
@login_required
@recruiter_required
def update_stage(app_id):
    app_row = _get_application(app_id)
    data = request_formdata()
    form = StageForm(formdata=data)
    if not form.validate():
        return validation_error(form)
    if "rating" in data:
        scale = float(current_app.config.get('MANAGER_RATING_SCALE', 5))
        if form.rating.data is not None and form.rating.data > scale:
            return _field_error("rating", f"Note maximale: {scale:g}")
        app_row.candidate.rating = form.rating.data
    app_row.stage = form.stage.data
    db.session.commit()

    mail_job = None
    if form.notify.data and app_row.stage == "offer":
        job = app_row.job_offer
        mail_job = _queue_decision_mail(app_row, f"Proposition pour le poste {job.title}",
                                        offer_body(app_row.candidate.name, job.title))
    payload = _application_payload(app_row)
    payload["mail_job_id"] = mail_job
    return jsonify(payload)


@bp.post("/applications/<int:app_id>/reject")
@login_required
@recruiter_required
def reject_application(app_id):
    app_row = _get_application(app_id)
    form = RejectForm(formdata=request_formdata())
    if not form.validate():
        return validation_error(form)
    app_row.stage = "rejected"
    db.session.commit()

    mail_job = None
    if form.send_email.data:
        job = app_row.job_offer
        mail_job = _queue_decision_mail(app_row, f"Votre candidature au poste {job.title}",
                                        rejection_body(app_row.candidate.name, job.title))
    payload = _application_payload(app_row)
    payload["mail_job_id"] = mail_job
    return jsonify(payload)


@bp.post("/jobs/<int:job_id>/scores/recalculate")
@login_required
@recruiter_required
def recalculate_scores(job_id):
    job = _get_job(job_id)
    queued = rq.enqueue(recalculate_job_ranking, job.id, job_timeout=300)
    if getattr(queued, "is_finished", False):
        return jsonify({"job_id": None, "status": "finished", "ranking": queued.result})
    return jsonify({"job_id": queued.id, "status": "queued"}), 202


@bp.get("/jobs/<int:job_id>/ranking")
@login_required
@recruitment_viewer
def ranking(job_id):
    job = _get_job(job_id)
    ranked = current_ranking(job)
    return jsonify({"job_offer_id": job.id, "ranking": [r.to_dict() for r in ranked]})


@bp.get("/jobs/<int:job_id>/ranking.csv")
@login_required
@recruitment_viewer
def ranking_csv(job_id):
    job = _get_job(job_id)
    buf = StringIO()
    writer = csv.DictWriter(buf, fieldnames=RANKING_COLUMNS)
    writer.writeheader()
    writer.writerows(ranking_rows(current_ranking(job)))
    bio = BytesIO(buf.getvalue().encode('utf-8'))
    return send_file(bio, as_attachment=True, download_name=f'ranking_job_{job.id}.csv', mimetype='text/csv')
