"""Notification adapters."""

from tipster_monitor.adapters.notifications.email_notifier import EmailNotifier
from tipster_monitor.adapters.notifications.slack_notifier import SlackNotifier

__all__ = ["EmailNotifier", "SlackNotifier"]
