"""Tests for the card model."""

import random

import pytest

from hearts.cards import (
    QUEEN_OF_SPADES,
    TWO_OF_CLUBS,
    Card,
    Rank,
    Suit,
    card_from_id,
    make_deck,
    shuffled_deck,
    sort_hand,
)


def test_deck_has_52_unique_cards():
    deck = make_deck()
    assert len(deck) == 52
    assert len({c.id for c in deck}) == 52


def test_shuffled_deck_is_seeded():
    a = shuffled_deck(random.Random(7))
    b = shuffled_deck(random.Random(7))
    assert a == b
    assert sorted(c.id for c in a) == sorted(c.id for c in make_deck())


def test_card_ids_and_values():
    assert TWO_OF_CLUBS.id == "2C"
    assert QUEEN_OF_SPADES.id == "QS"
    assert Card.of(Rank.TEN, Suit.DIAMONDS).id == "TD"
    assert Card.of(Rank.TWO, Suit.HEARTS).value == 2
    assert Card.of(Rank.ACE, Suit.HEARTS).value == 14


def test_card_from_id_accepts_ten_spellings():
    assert card_from_id("TH") == card_from_id("10H") == Card.of(Rank.TEN, Suit.HEARTS)
    assert card_from_id("qs") == QUEEN_OF_SPADES


@pytest.mark.parametrize("bad", ["", "Q", "1C", "QX", "ZZ"])
def test_card_from_id_rejects_garbage(bad):
    with pytest.raises(ValueError, match="Invalid card id"):
        card_from_id(bad)


def test_sort_hand_orders_suits_then_ranks():
    hand = [card_from_id(c) for c in ["AH", "2S", "KC", "3D", "2C", "TD"]]
    assert [c.id for c in sort_hand(hand)] == ["2C", "KC", "3D", "TD", "2S", "AH"]


def test_card_str():
    assert str(card_from_id("TH")) == "10♥"
    assert str(QUEEN_OF_SPADES) == "Q♠"
