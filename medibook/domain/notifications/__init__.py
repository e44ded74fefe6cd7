"""Notifications domain - in-app notification storage"""
