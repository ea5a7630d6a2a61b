"""
Study module - interactive study sessions over a deck's cards.

The engine and controls are pure; store, service and router host them
behind the API.
"""
