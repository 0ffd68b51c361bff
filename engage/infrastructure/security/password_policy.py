"""Password policy applied by the credential store on create, change and reset."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PasswordPolicy:
    """Length and character-class requirements. validate() returns reasons, empty when valid."""

    min_length: int = 8
    require_digit: bool = True
    require_lowercase: bool = True
    require_uppercase: bool = True
    require_non_alphanumeric: bool = True

    def validate(self, password: str) -> list[str]:
        errors: list[str] = []
        if len(password) < self.min_length:
            errors.append(f"Password must be at least {self.min_length} characters.")
        if self.require_digit and not any(c.isdigit() for c in password):
            errors.append("Password must contain at least one digit.")
        if self.require_lowercase and not any(c.islower() for c in password):
            errors.append("Password must contain at least one lowercase letter.")
        if self.require_uppercase and not any(c.isupper() for c in password):
            errors.append("Password must contain at least one uppercase letter.")
        if self.require_non_alphanumeric and all(c.isalnum() for c in password):
            errors.append("Password must contain at least one non-alphanumeric character.")
        return errors


DEFAULT_PASSWORD_POLICY = PasswordPolicy()
