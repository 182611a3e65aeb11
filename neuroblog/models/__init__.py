from neuroblog.models.user import User
from neuroblog.models.category import Category
from neuroblog.models.post import Post
from neuroblog.models.comment import Comment
from neuroblog.models.suggestion import Suggestion
from .session import Session
