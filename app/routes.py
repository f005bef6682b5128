from app.home.routes import routes as routes_home
from app.api import TriageController, FeedbackController

ROUTES = [
    *routes_home,
    TriageController,
    FeedbackController,
]
