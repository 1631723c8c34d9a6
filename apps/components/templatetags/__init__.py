"""
Template tags package for shared UI components.

- preloader: busy indicator shown while an HTMX request is in flight
"""
