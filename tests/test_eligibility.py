"""Unit tests for the role-gated login table and registration rules."""

import pytest

from estatehub.core.exceptions import (
    AccountPendingApproval,
    EmailNotVerified,
    IdNotVerified,
    InvalidRole,
    ReservedDomainViolation,
)
from estatehub.models.user import ApprovalStatus, EmailStatus, IdStatus, UserRole
from estatehub.services.eligibility import (
    accepts_id_document,
    check_email_domain,
    initial_approval,
    login_failure,
    parse_role,
)

E = EmailStatus
I = IdStatus
A = ApprovalStatus
R = UserRole


@pytest.mark.parametrize(
    "role,email,id_status,approval,expected",
    [
        # Email gate comes first for every role
        (R.BUYER, E.UNVERIFIED, I.NOT_SUBMITTED, A.APPROVED, EmailNotVerified),
        (R.SELLER, E.UNVERIFIED, I.VERIFIED, A.APPROVED, EmailNotVerified),
        (R.ADMIN, E.UNVERIFIED, I.VERIFIED, A.APPROVED, EmailNotVerified),
        # Buyers only need the email
        (R.BUYER, E.VERIFIED, I.NOT_SUBMITTED, A.PENDING, None),
        # Sellers and agents: ID first, then approval
        (R.SELLER, E.VERIFIED, I.NOT_SUBMITTED, A.PENDING, IdNotVerified),
        (R.SELLER, E.VERIFIED, I.PENDING_REVIEW, A.APPROVED, IdNotVerified),
        (R.SELLER, E.VERIFIED, I.VERIFIED, A.PENDING, AccountPendingApproval),
        (R.SELLER, E.VERIFIED, I.VERIFIED, A.APPROVED, None),
        (R.AGENT, E.VERIFIED, I.PENDING_REVIEW, A.PENDING, IdNotVerified),
        (R.AGENT, E.VERIFIED, I.VERIFIED, A.PENDING, AccountPendingApproval),
        (R.AGENT, E.VERIFIED, I.VERIFIED, A.APPROVED, None),
        # Admins need everything
        (R.ADMIN, E.VERIFIED, I.NOT_SUBMITTED, A.APPROVED, AccountPendingApproval),
        (R.ADMIN, E.VERIFIED, I.VERIFIED, A.PENDING, AccountPendingApproval),
        (R.ADMIN, E.VERIFIED, I.VERIFIED, A.APPROVED, None),
    ],
)
def test_login_table(role, email, id_status, approval, expected):
    failure = login_failure(role, email, id_status, approval)
    if expected is None:
        assert failure is None
    else:
        assert isinstance(failure, expected)


def test_main_admin_is_exempt_from_every_gate():
    assert login_failure(R.ADMIN, E.UNVERIFIED, I.NOT_SUBMITTED, A.PENDING, main_admin=True) is None


def test_admin_failure_message():
    failure = login_failure(R.ADMIN, E.VERIFIED, I.VERIFIED, A.PENDING)
    assert failure.message == "Admin account not verified"
    assert failure.status_code == 403


class TestRegistrationRules:

    @pytest.mark.parametrize("raw", ["buyer", " Seller ", "AGENT", "admin"])
    def test_parse_role_is_lenient_about_case_and_spaces(self, raw):
        assert parse_role(raw).value == raw.strip().lower()

    @pytest.mark.parametrize("raw", [None, "", "landlord"])
    def test_parse_role_rejects_unknown(self, raw):
        with pytest.raises(InvalidRole):
            parse_role(raw)

    def test_admin_must_use_reserved_domain(self):
        with pytest.raises(ReservedDomainViolation):
            check_email_domain(R.ADMIN, "boss@example.com")
        check_email_domain(R.ADMIN, "boss@ds.gmail.com")

    @pytest.mark.parametrize("role", [R.BUYER, R.SELLER, R.AGENT])
    def test_reserved_domain_is_admin_only(self, role):
        with pytest.raises(ReservedDomainViolation):
            check_email_domain(role, "someone@DS.gmail.com")
        check_email_domain(role, "someone@gmail.com")

    def test_initial_approval(self):
        assert initial_approval(R.BUYER) == A.APPROVED
        for role in (R.SELLER, R.AGENT, R.ADMIN):
            assert initial_approval(role) == A.PENDING

    def test_only_buyers_skip_id_documents(self):
        assert accepts_id_document(R.BUYER) is False
        for role in (R.SELLER, R.AGENT, R.ADMIN):
            assert accepts_id_document(role) is True
