"""Vendor onboarding Telegram bot."""
