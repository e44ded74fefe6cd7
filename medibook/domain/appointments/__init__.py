"""Appointments domain - booking, availability rules and the status lifecycle"""
