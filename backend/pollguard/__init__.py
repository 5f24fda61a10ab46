"""
Pollguard: request handling, input validation and rate limiting for a
polling web application.
"""
