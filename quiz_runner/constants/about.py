"""Static metadata describing QuizRunner."""

APP_NAME = "QuizRunner"
APP_VERSION = "0.1.0"
APP_ABOUT_TEXT = (
    "QuizRunner compiles declarative quiz definitions, scores answer events "
    "for a single session and serves read-only views of the progress."
)
