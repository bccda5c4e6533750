"""Fitness onboarding backend: workout program scheduling service."""
