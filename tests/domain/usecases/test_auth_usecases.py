"""Unit tests for authentication use cases."""

from unittest.mock import Mock

import pytest

from gullycric.domain.common.result import Failure, FailureType, Result
from gullycric.domain.models.user import UserDomain
from gullycric.domain.usecases.auth_usecases import (
    ChangePasswordParams,
    ChangePasswordUseCase,
    CheckPhoneAvailabilityUseCase,
    EmailParams,
    LoginWithEmailParams,
    LoginWithEmailUseCase,
    LoginWithPhoneParams,
    LoginWithPhoneUseCase,
    PasswordParams,
    SendOtpParams,
    SendPasswordResetEmailUseCase,
    SignUpWithEmailParams,
    SignUpWithEmailUseCase,
    ValidatePasswordStrengthUseCase,
)

STRONG_PASSWORD = "Str0ng!Pass"


@pytest.fixture
def repository():
    repo = Mock()
    repo.is_email_available.return_value = Result.success(True)
    repo.is_phone_available.return_value = Result.success(True)
    repo.sign_up_with_email.side_effect = lambda **kw: Result.success(
        UserDomain(id="user_1", email=kw["email"], first_name=kw["first_name"])
    )
    return repo


class TestLoginWithEmail:
    """Test email sign-in validation."""

    def test_invalid_email_code(self, repository):
        result = LoginWithEmailUseCase(repository)(LoginWithEmailParams(email="nope", password="secret1"))

        assert result.error.code == "INVALID_EMAIL"
        repository.sign_in_with_email.assert_not_called()

    def test_empty_password(self, repository):
        result = LoginWithEmailUseCase(repository)(LoginWithEmailParams(email="a@b.com", password=""))

        assert result.error.message == "Password cannot be empty"

    def test_short_password(self, repository):
        result = LoginWithEmailUseCase(repository)(LoginWithEmailParams(email="a@b.com", password="12345"))

        assert result.error.message == "Password must be at least 6 characters"

    def test_email_is_normalized(self, repository):
        repository.sign_in_with_email.return_value = Result.success(UserDomain(id="u", email="a@b.com"))

        LoginWithEmailUseCase(repository)(LoginWithEmailParams(email="  A@B.com ", password="secret1"))

        repository.sign_in_with_email.assert_called_once_with("a@b.com", "secret1")

    def test_repository_failure_passes_through(self, repository):
        repository.sign_in_with_email.return_value = Result.failure(Failure.invalid_credentials())

        result = LoginWithEmailUseCase(repository)(LoginWithEmailParams(email="a@b.com", password="secret1"))

        assert result.error.failure_type == FailureType.INVALID_CREDENTIALS


class TestPhoneLogin:
    def test_invalid_phone(self, repository):
        result = LoginWithPhoneUseCase(repository)(LoginWithPhoneParams(phone_number="abc", otp="123456"))

        assert result.error.code == "INVALID_PHONE"

    def test_otp_must_be_six_digits(self, repository):
        result = LoginWithPhoneUseCase(repository)(LoginWithPhoneParams(phone_number="+1234567890", otp="12ab"))

        assert result.error.message == "OTP must be 6 digits"
        repository.sign_in_with_phone.assert_not_called()

    def test_phone_availability_checks_format(self, repository):
        result = CheckPhoneAvailabilityUseCase(repository)(SendOtpParams(phone_number="0"))

        assert result.error.code == "INVALID_PHONE"


class TestSignUp:
    """Test registration rules and availability checks."""

    def params(self, **kwargs):
        fields = dict(
            email="New.Player@Example.com",
            password=STRONG_PASSWORD,
            first_name="Asha",
            last_name="Rao",
        )
        fields.update(kwargs)
        return SignUpWithEmailParams(**fields)

    def test_registers_normalized_email(self, repository):
        result = SignUpWithEmailUseCase(repository)(self.params())

        assert result.is_success
        assert result.value.email == "new.player@example.com"
        repository.is_email_available.assert_called_once_with("new.player@example.com")

    @pytest.mark.parametrize(
        "password, message",
        [
            ("Sh0rt!", "Password must be at least 8 characters long"),
            ("alllower1!", "Password must contain at least one uppercase letter"),
            ("NoDigits!!", "Password must contain at least one number"),
            ("NoSpecial12", "Password must contain at least one special character"),
        ],
    )
    def test_weak_passwords(self, repository, password, message):
        result = SignUpWithEmailUseCase(repository)(self.params(password=password))

        assert result.error.message == message
        assert result.error.field_errors == {"password": message}

    def test_short_first_name(self, repository):
        result = SignUpWithEmailUseCase(repository)(self.params(first_name="A"))

        assert result.error.field_errors == {"first_name": "First name must be at least 2 characters"}

    def test_email_taken(self, repository):
        repository.is_email_available.return_value = Result.success(False)

        result = SignUpWithEmailUseCase(repository)(self.params())

        assert result.error.code == "EMAIL_EXISTS"
        repository.sign_up_with_email.assert_not_called()

    def test_phone_taken(self, repository):
        repository.is_phone_available.return_value = Result.success(False)

        result = SignUpWithEmailUseCase(repository)(self.params(phone_number="+1234567890"))

        assert result.error.code == "PHONE_EXISTS"

    def test_phone_not_checked_when_absent(self, repository):
        SignUpWithEmailUseCase(repository)(self.params())

        repository.is_phone_available.assert_not_called()


class TestPasswordManagement:
    def test_reset_email_validates_address(self, repository):
        result = SendPasswordResetEmailUseCase(repository)(EmailParams(email="bad"))

        assert result.error.code == "INVALID_EMAIL"

    def test_new_password_must_differ(self, repository):
        params = ChangePasswordParams(current_password=STRONG_PASSWORD, new_password=STRONG_PASSWORD)

        result = ChangePasswordUseCase(repository)(params)

        assert result.error.message == "New password must be different from current password"
        repository.change_password.assert_not_called()

    def test_strength_of_common_password(self):
        strength = ValidatePasswordStrengthUseCase()(PasswordParams(password="password123")).value

        assert strength.level == "weak"
        assert not strength.is_valid

    def test_strength_of_long_mixed_password(self):
        strength = ValidatePasswordStrengthUseCase()(PasswordParams(password="Str0ng!Pass#2024")).value

        assert strength.level == "strong"
        assert strength.score == 6
        assert strength.feedback == []
