"""DevConnect — social profile backend for developers.

Users register and log in, maintain a profile with experience and
education, and publish posts that others can like and comment on.
"""

__version__ = "0.1.0"
