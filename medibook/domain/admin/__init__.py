"""Admin domain - dashboard, doctor onboarding and user management"""
