"""Service-level tests for registration, login, email codes and admin workflows."""

from datetime import timedelta

import pytest

from estatehub.core.config import settings
from estatehub.core.exceptions import (
    AccountPendingApproval,
    DuplicateEmail,
    EmailNotVerified,
    IdNotVerified,
    InvalidCredentials,
    InvalidEmailFormat,
    InvalidRole,
    InvalidVerificationCode,
    NotFound,
    PermissionDenied,
    ReservedDomainViolation,
    WeakPassword,
)
from estatehub.models.message import Block, Message
from estatehub.models.property import Property
from estatehub.models.report import Report, ReportReason
from estatehub.models.review import Review
from estatehub.models.user import ApprovalStatus, EmailStatus, IdStatus, User, UserRole
from estatehub.services import auth_service, email_verification, messaging, reports, reviews
from estatehub.services.email_verification import _now

from conftest import PASSWORD


def _register(db, email="alice@example.com", role="buyer", password="abc123", **kwargs):
    return auth_service.register(db, "Alice", email, password, role, **kwargs)


class TestRegister:

    def test_buyer_starts_unverified_but_approved(self, db_session):
        user = _register(db_session)
        assert user.role == UserRole.BUYER
        assert user.email_status == EmailStatus.UNVERIFIED
        assert user.id_status == IdStatus.NOT_SUBMITTED
        assert user.approval_status == ApprovalStatus.APPROVED
        assert user.email_verification_code is not None
        assert len(user.email_verification_code) == 6

    def test_seller_starts_pending(self, db_session):
        user = _register(db_session, role="seller", government_id=" AB123 ")
        assert user.approval_status == ApprovalStatus.PENDING
        assert user.government_id == "AB123"

    def test_email_is_trimmed(self, db_session):
        user = _register(db_session, email="  bob@example.com ")
        assert user.email == "bob@example.com"

    def test_duplicate_email_is_case_insensitive(self, db_session):
        _register(db_session)
        with pytest.raises(DuplicateEmail):
            _register(db_session, email="ALICE@example.com")

    def test_duplicate_checked_before_format(self, db_session, make_user):
        make_user(email="odd@local")
        with pytest.raises(DuplicateEmail):
            _register(db_session, email="odd@local", password="x")

    @pytest.mark.parametrize(
        "kwargs,error",
        [
            ({"email": "not-an-email"}, InvalidEmailFormat),
            ({"password": "short"}, WeakPassword),
            ({"password": "onlyletters"}, WeakPassword),
            ({"role": "landlord"}, InvalidRole),
            ({"role": "admin", "email": "boss@example.com"}, ReservedDomainViolation),
            ({"role": "seller", "email": "sneaky@ds.gmail.com"}, ReservedDomainViolation),
        ],
    )
    def test_rejections(self, db_session, kwargs, error):
        with pytest.raises(error):
            _register(db_session, **kwargs)
        assert db_session.query(User).count() == 0

    def test_weak_password_reports_requirements(self, db_session):
        with pytest.raises(WeakPassword) as exc:
            _register(db_session, password="abc")
        assert "letters and numbers" in exc.value.message

    def test_seller_registers_with_id_document(self, db_session):
        user = _register(db_session, role="seller", id_document_path="/private/doc.png")
        assert user.id_document_path == "/private/doc.png"
        assert user.id_status == IdStatus.PENDING_REVIEW
        assert user.approval_status == ApprovalStatus.PENDING

    def test_buyer_id_document_is_not_recorded(self, db_session):
        user = _register(db_session, id_document_path="/private/doc.png")
        assert user.id_document_path is None
        assert user.id_status == IdStatus.NOT_SUBMITTED


class TestLogin:

    def test_unverified_buyer_then_verified(self, db_session):
        user = _register(db_session, password="pass1234")
        with pytest.raises(EmailNotVerified):
            auth_service.login(db_session, "alice@example.com", "pass1234")

        email_verification.verify_code(db_session, user, user.email_verification_code)
        logged_in = auth_service.login(db_session, "alice@example.com", "pass1234")
        assert logged_in.id == user.id

    def test_seller_without_id(self, db_session):
        user = _register(db_session, role="seller", password="pass1234")
        email_verification.verify_code(db_session, user, user.email_verification_code)
        with pytest.raises(IdNotVerified):
            auth_service.login(db_session, "alice@example.com", "pass1234")

    def test_agent_verified_id_waiting_for_approval(self, db_session, make_user):
        agent = make_user(role=UserRole.AGENT, approval_status=ApprovalStatus.PENDING)
        with pytest.raises(AccountPendingApproval):
            auth_service.login(db_session, agent.email, PASSWORD)

    def test_unverified_admin(self, db_session, make_user):
        admin = make_user(role=UserRole.ADMIN, approval_status=ApprovalStatus.PENDING)
        with pytest.raises(AccountPendingApproval) as exc:
            auth_service.login(db_session, admin.email, PASSWORD)
        assert exc.value.message == "Admin account not verified"

    def test_wrong_password_and_unknown_email(self, db_session, make_user):
        user = make_user()
        with pytest.raises(InvalidCredentials):
            auth_service.login(db_session, user.email, "wrong999")
        with pytest.raises(InvalidCredentials):
            auth_service.login(db_session, "ghost@example.com", PASSWORD)

    def test_login_email_is_case_insensitive(self, db_session, make_user):
        user = make_user(email="carol@example.com")
        assert auth_service.login(db_session, " Carol@Example.com ", PASSWORD).id == user.id

    def test_main_admin_override_creates_account(self, db_session):
        assert db_session.query(User).count() == 0
        admin = auth_service.login(
            db_session, settings.MAIN_ADMIN_EMAIL.upper(), settings.MAIN_ADMIN_PASSWORD
        )
        assert admin.role == UserRole.ADMIN
        assert admin.is_verified
        assert admin.government_id == auth_service.MAIN_ADMIN_GOVERNMENT_ID

        again = auth_service.login(db_session, settings.MAIN_ADMIN_EMAIL, settings.MAIN_ADMIN_PASSWORD)
        assert again.id == admin.id
        assert db_session.query(User).count() == 1

    def test_main_admin_override_ignores_stored_state(self, db_session):
        admin = auth_service.ensure_main_admin(db_session)
        admin.email_status = EmailStatus.UNVERIFIED
        admin.approval_status = ApprovalStatus.PENDING
        db_session.commit()
        assert auth_service.login(
            db_session, settings.MAIN_ADMIN_EMAIL, settings.MAIN_ADMIN_PASSWORD
        ).id == admin.id


class TestEmailVerification:

    def test_wrong_code(self, db_session):
        user = _register(db_session)
        wrong = "000000" if user.email_verification_code != "000000" else "111111"
        with pytest.raises(InvalidVerificationCode):
            email_verification.verify_code(db_session, user, wrong)
        assert user.email_status == EmailStatus.UNVERIFIED

    def test_expired_code_is_cleared(self, db_session):
        user = _register(db_session)
        code = user.email_verification_code
        user.email_verification_expiry = _now() - timedelta(minutes=1)
        db_session.commit()

        with pytest.raises(InvalidVerificationCode) as exc:
            email_verification.verify_code(db_session, user, code)
        assert "expired" in exc.value.message
        assert user.email_verification_code is None

    def test_no_code_sent(self, db_session):
        user = _register(db_session, send_code=False)
        with pytest.raises(InvalidVerificationCode):
            email_verification.verify_code(db_session, user, "123456")

    def test_resend_replaces_code(self, db_session):
        user = _register(db_session, send_code=False)
        assert email_verification.send_verification_code(db_session, user) is True
        assert email_verification.is_code_valid(user)


class TestAdminWorkflows:

    def test_verify_user_is_idempotent(self, db_session):
        user = _register(db_session, role="seller")
        first = auth_service.verify_user(db_session, user.id)
        second = auth_service.verify_user(db_session, user.id)
        for u in (first, second):
            assert u.email_status == EmailStatus.VERIFIED
            assert u.id_status == IdStatus.VERIFIED
            assert u.approval_status == ApprovalStatus.APPROVED
            assert u.is_verified

    def test_verify_unknown_user(self, db_session):
        import uuid
        with pytest.raises(NotFound):
            auth_service.verify_user(db_session, uuid.uuid4())

    def test_reject_deletes_user(self, db_session, make_user):
        user = make_user(role=UserRole.SELLER, approval_status=ApprovalStatus.PENDING)
        auth_service.reject_user(db_session, user.id, "blurry document")
        assert db_session.get(User, user.id) is None

    def test_reject_removes_activity_and_refreshes_ratings(self, db_session, make_user, make_property):
        leaving = make_user(role=UserRole.SELLER)
        agent = make_user(role=UserRole.AGENT)
        buyer = make_user()
        listing = make_property(leaving)

        messaging.send_message(db_session, leaving, agent, "Shall we list together?")
        messaging.send_message(db_session, buyer, agent, "Hello")
        messaging.send_message(db_session, buyer, agent, "Seen this flat?", property_id=listing.id)
        messaging.send_message(db_session, buyer, leaving, "Is it still free?")
        reviews.add_review(db_session, leaving, agent.id, 1)
        reviews.add_review(db_session, buyer, agent.id, 5)
        messaging.block_user(db_session, agent.id, leaving.id)
        reports.create_report(db_session, buyer.id, ReportReason.SPAM, reported_user_id=leaving.id)
        reports.create_report(db_session, leaving.id, ReportReason.OTHER, reported_user_id=agent.id)
        assert agent.average_rating == 3.0

        leaving_id = leaving.id
        auth_service.reject_user(db_session, leaving_id)
        db_session.expire_all()

        remaining = db_session.query(Message).all()
        assert sorted(m.text for m in remaining) == ["Hello", "Seen this flat?"]
        assert all(m.property_id is None for m in remaining)
        assert db_session.query(Property).count() == 0
        assert db_session.query(Block).count() == 0
        assert db_session.query(Report).count() == 0
        assert [r.reviewer_id for r in db_session.query(Review).all()] == [buyer.id]

        agent = db_session.get(User, agent.id)
        assert agent.review_count == 1
        assert agent.average_rating == 5.0

    def test_main_admin_cannot_be_rejected(self, db_session):
        admin = auth_service.ensure_main_admin(db_session)
        with pytest.raises(PermissionDenied):
            auth_service.reject_user(db_session, admin.id)
        assert db_session.get(User, admin.id) is not None

    def test_pending_list_excludes_main_admin(self, db_session, make_user):
        admin = auth_service.ensure_main_admin(db_session)
        admin.approval_status = ApprovalStatus.PENDING
        db_session.commit()
        seller = make_user(role=UserRole.SELLER, approval_status=ApprovalStatus.PENDING)

        pending = auth_service.list_pending_approval(db_session)
        assert [u.id for u in pending] == [seller.id]

    def test_unverified_admins(self, db_session, make_user):
        pending_admin = make_user(role=UserRole.ADMIN, approval_status=ApprovalStatus.PENDING)
        make_user(role=UserRole.ADMIN)
        make_user(role=UserRole.SELLER, approval_status=ApprovalStatus.PENDING)

        assert [u.id for u in auth_service.list_unverified_admins(db_session)] == [pending_admin.id]
        auth_service.verify_admin(db_session, pending_admin.id)
        assert auth_service.list_unverified_admins(db_session) == []

    def test_unverified_lists_exclude_main_admin(self, db_session, make_user):
        admin = auth_service.ensure_main_admin(db_session)
        admin.id_status = IdStatus.PENDING_REVIEW
        admin.approval_status = ApprovalStatus.PENDING
        db_session.commit()
        pending_admin = make_user(role=UserRole.ADMIN, approval_status=ApprovalStatus.PENDING)

        assert [u.id for u in auth_service.list_unverified_admins(db_session)] == [pending_admin.id]
        assert [u.id for u in auth_service.list_unverified_users(db_session)] == [pending_admin.id]


class TestSelfService:

    def test_id_document_puts_seller_back_in_review(self, db_session, make_user):
        seller = make_user(role=UserRole.SELLER)
        auth_service.attach_id_document(db_session, seller, "/private/doc.pdf")
        assert seller.id_status == IdStatus.PENDING_REVIEW
        assert seller.approval_status == ApprovalStatus.PENDING
        assert seller in auth_service.list_pending_id_documents(db_session)

    def test_buyers_cannot_submit_id(self, db_session, make_user):
        with pytest.raises(PermissionDenied):
            auth_service.attach_id_document(db_session, make_user(), "/private/doc.pdf")

    def test_main_admin_cannot_submit_id(self, db_session):
        admin = auth_service.ensure_main_admin(db_session)
        with pytest.raises(PermissionDenied):
            auth_service.attach_id_document(db_session, admin, "/private/doc.pdf")
        assert admin.id_document_path is None
        assert admin.approval_status == ApprovalStatus.APPROVED

    def test_profile_update_ignores_unknown_fields(self, db_session, make_user):
        user = make_user()
        auth_service.update_profile(
            db_session, user, {"city": " Samarkand ", "email": "new@example.com", "bio": None}
        )
        assert user.city == "Samarkand"
        assert user.email != "new@example.com"

    def test_find_contact_by_email_or_name(self, db_session, make_user):
        me = make_user()
        other = make_user(role=UserRole.SELLER, name="Dilnoza Karimova")
        assert auth_service.find_contact(db_session, me, other.email).id == other.id
        assert auth_service.find_contact(db_session, me, "dilnoza karimova").id == other.id

    def test_find_contact_rules(self, db_session, make_user):
        me = make_user()
        pending = make_user(role=UserRole.SELLER, approval_status=ApprovalStatus.PENDING)
        with pytest.raises(PermissionDenied):
            auth_service.find_contact(db_session, me, pending.email)
        with pytest.raises(NotFound):
            auth_service.find_contact(db_session, me, "nobody@example.com")

        main_admin = auth_service.ensure_main_admin(db_session)
        assert auth_service.find_contact(db_session, main_admin, pending.email).id == pending.id
