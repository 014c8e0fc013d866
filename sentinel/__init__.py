"""Fraud Sentinel: real-time transaction risk scoring."""
