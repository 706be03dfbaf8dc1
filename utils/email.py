# utils/email.py
import logging
import os

import requests

logger = logging.getLogger(__name__)

BREVO_KEY = os.getenv("BREVO_API_KEY")
BREVO_URL = "https://api.brevo.com/v3/smtp/email"
FRONTEND_URL = os.getenv("FRONTEND_URL", "")


def send_lease_confirmation_email(
     to_email: str,
     tenant_name: str,
     unit_label: str,
     start_date,
     monthly_rent,
):
     if not BREVO_KEY:
          raise Exception("BREVO_API_KEY is not set")

     portal = f'<p><a href="{FRONTEND_URL}">Open your tenant portal</a></p>' if FRONTEND_URL else ""
     response = requests.post(
          BREVO_URL,
          headers={
               "api-key": BREVO_KEY,
               "Content-Type": "application/json",
          },
          json={
               "sender": {"name": "CondoEase", "email": "noreply@condoease.me"},
               "to": [{"email": to_email, "name": tenant_name}],
               "subject": "Your lease is now active",
               "htmlContent": f"""
                    <h2>Welcome home, {tenant_name}</h2>
                    <p>Your lease for <strong>{unit_label}</strong> starts on {start_date}.</p>
                    <p>Monthly rent: <strong style="color:#F28D35">{monthly_rent}</strong></p>
                    {portal}
               """,
          },
          timeout=10,
     )
     if response.status_code not in (200, 201):
          raise Exception(f"Brevo error: {response.text}")


def notify_lease_activated(lease_id: int, to_email, tenant_name: str, unit_label: str, start_date, monthly_rent):
     """
     Background task run after the lease transaction committed.

     Failures are logged and dropped; the lease is already Active.
     """
     if not to_email:
          logger.info("Lease %s: tenant has no email address, skipping confirmation", lease_id)
          return
     try:
          send_lease_confirmation_email(to_email, tenant_name, unit_label, start_date, monthly_rent)
          logger.info("Lease %s: confirmation email sent to %s", lease_id, to_email)
     except Exception:
          logger.exception("Lease %s: confirmation email to %s failed", lease_id, to_email)
