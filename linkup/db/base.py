# Import all models here so Alembic and create_all can see them
from linkup.db.session import Base

from linkup.modules.user_management.models.user import User
from linkup.modules.posts.models.post import Post, SavedPost, PostReport
from linkup.modules.posts.comments.models.comment import Comment
from linkup.modules.posts.likes.models.like import Like
from linkup.modules.follows.models.follow import FollowRequest
from linkup.modules.stories.models.story import Story, StoryView, StoryLike
from linkup.modules.highlights.models.highlight import Highlight, HighlightStory
from linkup.modules.notifications.models.notification import Notification
from linkup.modules.admin.models.audit_log import AuditLog
