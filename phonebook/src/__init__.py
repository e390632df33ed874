"""Phonebook client.

A contact-list view model and terminal front end that talks to the
persons resource of the bloglist service.
"""

__version__ = "0.1.0"
