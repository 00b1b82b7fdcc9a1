"""
Page Objects for UI automation.
"""

from .home_page import HomePage
from .login_page import LoginPage
from .todo_page import TodoPage

__all__ = [
    "HomePage",
    "LoginPage",
    "TodoPage",
]
