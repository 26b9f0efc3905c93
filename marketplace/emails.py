# marketplace/emails.py
from django.conf import settings
from django.core.mail import send_mail


def _submission_body(submission) -> str:
    lines = [
        f"New listing submission #{submission.pk}",
        "",
        f"Seller:   {submission.name}",
        f"Phone:    {submission.phone}",
        f"Location: {submission.location}",
        "",
        f"Bike:     {submission.make} {submission.model} ({submission.year})",
        f"Price:    {submission.price}",
        f"Driven:   {submission.km_driven} km",
        f"Engine:   {submission.engine_displacement} cc",
        f"Reg. no:  {submission.registration}",
        f"Condition: {submission.condition}",
        "",
        submission.description,
        "",
        f"Photos: {len(submission.images or [])}",
    ]
    return "\n".join(lines)


def notify_new_submission(submission):
    """Ping the sales team about a new sell lead. Never raises."""
    to = getattr(settings, "SUBMISSION_NOTIFICATION_EMAIL", "")
    if not to:
        return
    subject = f"[{getattr(settings, 'SITE_NAME', 'BikeMart')}] New bike to review: {submission.make} {submission.model}"
    send_mail(subject, _submission_body(submission), settings.DEFAULT_FROM_EMAIL, [to], fail_silently=True)
