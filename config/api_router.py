from django.urls import path
from rest_framework.routers import SimpleRouter

from noel_famille.backoffice.api.views import AdminCodeViewSet
from noel_famille.backoffice.api.views import AdminEventViewSet
from noel_famille.backoffice.api.views import AdminMessageViewSet
from noel_famille.backoffice.api.views import AdminPollViewSet
from noel_famille.backoffice.api.views import AdminUserViewSet
from noel_famille.backoffice.api.views import MetricsView
from noel_famille.backoffice.api.views import UploadsModerationView
from noel_famille.chat.api.views import ChatImageUploadView
from noel_famille.chat.api.views import ChatMessagesView
from noel_famille.contributions.api.views import ContributionImageUploadView
from noel_famille.contributions.api.views import ContributionViewSet
from noel_famille.events.api.views import EventViewSet
from noel_famille.menu.api.views import MenuIngredientViewSet
from noel_famille.menu.api.views import MenuRecipeViewSet
from noel_famille.polls.api.views import PollAutoCloseView
from noel_famille.polls.api.views import PollImageUploadView
from noel_famille.polls.api.views import PollViewSet
from noel_famille.reminders.api.views import SendRemindersView
from noel_famille.tasks.api.views import TaskViewSet
from noel_famille.users.api.views import ProfileView

# Paths are served with or without a trailing slash
router = SimpleRouter(trailing_slash="/?")

router.register("events", EventViewSet, basename="events")
router.register("contributions", ContributionViewSet, basename="contributions")
router.register("polls", PollViewSet, basename="polls")
router.register("tasks", TaskViewSet, basename="tasks")
# Ingredients first so "menu/ingredients/<id>" is not read as a recipe
router.register("menu/ingredients", MenuIngredientViewSet, basename="menu-ingredients")
router.register("menu", MenuRecipeViewSet, basename="menu")
router.register("admin/codes", AdminCodeViewSet, basename="admin-codes")
router.register("admin/events", AdminEventViewSet, basename="admin-events")
router.register("admin/users", AdminUserViewSet, basename="admin-users")
router.register("admin/messages", AdminMessageViewSet, basename="admin-messages")
router.register("admin/polls", AdminPollViewSet, basename="admin-polls")


app_name = "api"
# Explicit paths go before the router so they are not taken for detail routes
urlpatterns = [
    path(
        "contributions/upload",
        ContributionImageUploadView.as_view(),
        name="contributions-upload",
    ),
    path("polls/upload", PollImageUploadView.as_view(), name="polls-upload"),
    path("polls/auto-close", PollAutoCloseView.as_view(), name="polls-auto-close"),
    path("chat", ChatMessagesView.as_view(), name="chat"),
    path("chat/upload", ChatImageUploadView.as_view(), name="chat-upload"),
    path("admin/uploads", UploadsModerationView.as_view(), name="admin-uploads"),
    path("admin/metrics", MetricsView.as_view(), name="admin-metrics"),
    path("profile", ProfileView.as_view(), name="profile"),
    path("reminders/send", SendRemindersView.as_view(), name="reminders-send"),
    *router.urls,
]
