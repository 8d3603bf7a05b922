"""Admission and approval workflow for reservations and pickup orders."""
