from app.db.models.comment import Comment
from app.db.models.follow import Follow
from app.db.models.like import Like
from app.db.models.post import Post
from app.db.models.user import User

__all__ = ["User", "Post", "Follow", "Like", "Comment"]
