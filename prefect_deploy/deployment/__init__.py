"""Deployment steps, external tool interfaces and their shell implementations."""
