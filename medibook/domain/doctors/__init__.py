"""Doctors domain - public directory and doctor self-service profile"""
