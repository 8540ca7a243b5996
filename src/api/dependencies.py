import os

from fastapi import BackgroundTasks, HTTPException

from adapter.external.google_identity import GoogleIdentityAdapter
from adapter.external.notifier import LoggingNotifier, WebhookNotifier
from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.todo_repository import MongoTodoRepository
from adapter.mongodb.user_repository import MongoUserRepository
from port.identity_provider import IdentityProviderPort
from port.notifier import NotifierPort
from port.todo_repository import TodoRepository
from port.user_repository import UserRepository

NOTIFY_WEBHOOK_URL = os.getenv("NOTIFY_WEBHOOK_URL")


def _get_db():
    """Get MongoDB database, raising 503 if unavailable."""
    client = get_mongodb_client()
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[DATABASE_NAME]


def get_user_repo() -> UserRepository:
    return MongoUserRepository(_get_db())


def get_todo_repo() -> TodoRepository:
    return MongoTodoRepository(_get_db())


def get_notifier(background_tasks: BackgroundTasks) -> NotifierPort:
    """Webhook delivery runs as a background task after the response is sent."""
    if NOTIFY_WEBHOOK_URL:
        return WebhookNotifier(NOTIFY_WEBHOOK_URL, schedule=background_tasks.add_task)
    return LoggingNotifier()


def get_identity_provider() -> IdentityProviderPort:
    return GoogleIdentityAdapter()
