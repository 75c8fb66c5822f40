"""Email services package"""
from .dispatcher import BrevoEmailDispatcher, EmailDispatcher
from .templates import EmailMessage, render_status_email

__all__ = ['BrevoEmailDispatcher', 'EmailDispatcher', 'EmailMessage', 'render_status_email']
