from .notification import Notification, Notifier
from .phonebook import PhonebookView
from .render import render

__all__ = ["Notification", "Notifier", "PhonebookView", "render"]
