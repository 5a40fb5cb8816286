import uuid

import pytest

from estatehub.core.exceptions import InvalidRating, NoInteraction, NotFound, SelfReview
from estatehub.models.review import Review
from estatehub.models.user import UserRole
from estatehub.services import messaging, reviews


@pytest.fixture
def buyer_and_seller(make_user):
    return make_user(), make_user(role=UserRole.SELLER)


def test_review_requires_prior_message(db_session, buyer_and_seller):
    buyer, seller = buyer_and_seller
    with pytest.raises(NoInteraction):
        reviews.add_review(db_session, buyer, seller.id, 4)

    messaging.send_message(db_session, buyer, seller, "Is it still available?")
    review = reviews.add_review(db_session, buyer, seller.id, 4, "Quick answers")

    db_session.refresh(seller)
    assert review.rating == 4
    assert seller.review_count == 1
    assert seller.average_rating == 4.0


def test_receiving_a_message_is_not_enough(db_session, buyer_and_seller):
    buyer, seller = buyer_and_seller
    messaging.send_message(db_session, seller, buyer, "Hi, interested?")
    with pytest.raises(NoInteraction):
        reviews.add_review(db_session, buyer, seller.id, 5)


def test_second_review_overwrites_the_first(db_session, buyer_and_seller):
    buyer, seller = buyer_and_seller
    messaging.send_message(db_session, buyer, seller, "hello")

    reviews.add_review(db_session, buyer, seller.id, 2)
    reviews.add_review(db_session, buyer, seller.id, 5, "Changed my mind")

    rows = db_session.query(Review).filter(Review.target_user_id == seller.id).all()
    assert len(rows) == 1
    assert rows[0].comment == "Changed my mind"
    db_session.refresh(seller)
    assert seller.review_count == 1
    assert seller.average_rating == 5.0


def test_average_across_reviewers(db_session, make_user, buyer_and_seller):
    buyer, seller = buyer_and_seller
    other = make_user()
    for reviewer, rating in ((buyer, 3), (other, 4)):
        messaging.send_message(db_session, reviewer, seller, "hi")
        reviews.add_review(db_session, reviewer, seller.id, rating)

    db_session.refresh(seller)
    assert seller.review_count == 2
    assert seller.average_rating == pytest.approx(3.5)
    assert reviews.compute_average_rating(db_session, seller.id) == pytest.approx(3.5)
    assert len(reviews.get_reviews_for_user(db_session, seller.id)) == 2


@pytest.mark.parametrize("rating", [0, 6, -1, None])
def test_rating_out_of_range(db_session, buyer_and_seller, rating):
    buyer, seller = buyer_and_seller
    with pytest.raises(InvalidRating):
        reviews.add_review(db_session, buyer, seller.id, rating)


def test_rating_checked_before_self_review(db_session, buyer_and_seller):
    buyer, _ = buyer_and_seller
    with pytest.raises(InvalidRating):
        reviews.add_review(db_session, buyer, buyer.id, 9)
    with pytest.raises(SelfReview):
        reviews.add_review(db_session, buyer, buyer.id, 3)


def test_unknown_target(db_session, buyer_and_seller):
    buyer, _ = buyer_and_seller
    with pytest.raises(NotFound):
        reviews.add_review(db_session, buyer, uuid.uuid4(), 3)


def test_contacted_users_are_reviewable(db_session, make_user, buyer_and_seller):
    buyer, seller = buyer_and_seller
    stranger = make_user()
    messaging.send_message(db_session, buyer, seller, "hi")
    messaging.send_message(db_session, stranger, buyer, "hi")

    assert [u.id for u in reviews.get_contacted_users(db_session, buyer.id)] == [seller.id]
