# -*- coding: utf-8 -*-
"""Calorie tracker backend.

Domains: auth (Google sign-in + session), logs (activity CRUD), stats,
analyze (Gemini text parsing), admin, verification (human gate).
"""
