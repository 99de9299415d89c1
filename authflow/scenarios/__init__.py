from authflow.scenarios.login import LoginRunner, reset_authentication
from authflow.scenarios.registration import RegistrationRunner, classify_registration

__all__ = ["LoginRunner", "RegistrationRunner", "classify_registration", "reset_authentication"]
