"""
Modules package initialization.
This package contains all the functional modules of the application:
auth, user_management, follows, posts (with comments and likes), stories,
highlights, notifications, home_feed, admin and media.
"""
