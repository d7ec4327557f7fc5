"""Infrastructure layer — filesystem, subprocess, and network access.

Infrastructure modules may import from domain. They raise typed
exceptions; the service layer converts them into ServiceResult errors.
"""
