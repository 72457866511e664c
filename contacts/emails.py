# contacts/emails.py
from django.conf import settings
from django.core.mail import send_mail
from django.utils import timezone


def send_contact_notification(contact):
    """
    Tell the site admin about a new contact form submission.
    """
    admin_email = getattr(settings, "ADMIN_EMAIL", None)
    if not admin_email:
        return

    submitted = timezone.localtime(contact.created_at).strftime("%d %b %Y, %H:%M")
    message = (
        f"New contact form submission\n\n"
        f"Name: {contact.name}\n"
        f"Email: {contact.email}\n"
        f"Phone: {contact.phone or '-'}\n"
        f"Category: {contact.get_category_display()}\n"
        f"Subject: {contact.subject}\n\n"
        f"{contact.message}\n\n"
        f"Submitted: {submitted}"
    )

    send_mail(
        subject=f"New Contact Form Submission: {contact.subject}",
        message=message,
        from_email=getattr(settings, "DEFAULT_FROM_EMAIL", None),
        recipient_list=[admin_email],
    )


def send_contact_response(contact):
    """
    Mail the admin's response back to the person who wrote in.
    """
    if not contact.email or not contact.response_message:
        return

    message = (
        f"Dear {contact.name},\n\n"
        f"Thank you for contacting us. Here is our response to your inquiry:\n\n"
        f"{contact.response_message}\n\n"
        f"If you have any further questions, just reply to this email.\n\n"
        f"Best regards,\n"
        f"The Team"
    )

    send_mail(
        subject=f"Re: {contact.subject}",
        message=message,
        from_email=getattr(settings, "DEFAULT_FROM_EMAIL", None),
        recipient_list=[contact.email],
    )
