"""Extension layer — initializer delegation via pluggy.

The scaffold itself is written by an initializer shipped inside the
installed scripts package, discovered under ``scripts/`` at install time.
"""

from create_seneca_service.plugins.manager import InitializerManager

__all__ = ["InitializerManager"]
