"""Program attendance package.

Check-in tokens, attendance classification and deposit settlement for
multi-session programs, organized by feature module (tokens, attendance,
refunds) with a thin Flask controller layer over service/repository layers.
"""
