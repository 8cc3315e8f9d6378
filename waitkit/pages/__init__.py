"""
Page objects built on the wait engine.
"""

from .base_page import BasePage
from .login_page import LoginPage

__all__ = [
    "BasePage",
    "LoginPage",
]
