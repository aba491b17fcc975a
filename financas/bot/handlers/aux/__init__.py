from .send_payment_summary import send_payment_summary
