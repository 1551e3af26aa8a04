"""
Random number generation for deck shuffling and dealer determination.

Uses PCG64DXSM (Permuted Congruential Generator with DXSM output function):
1. Generate a cryptographic seed (32 bytes / 256 bits) via secrets module
2. Derive per-round RNG state via SHA512 with domain separation (versioned prefix)
3. Use PCG64DXSM to generate random uint64 values
4. Apply Fisher-Yates shuffle with rejection sampling for an unbiased permutation

The same seed always yields the same deck order for a given round number,
which makes whole matches reproducible from the seed alone.

Reference: O'Neill, M. (2014). "PCG: A Family of Simple Fast Space-Efficient
Statistically Good Algorithms for Random Number Generation."
"""

import hashlib
import secrets

from hanafuda.logic.cards import ALL_CARD_IDS, card_month

SEED_BYTES = 32  # 256 bits, exceeds 48! ~ 2^203 possible deck orders
RNG_VERSION = "pcg64dxsm-v1"  # stored in the match ledger for replay compatibility detection
_DOMAIN_PREFIX = b"hanafuda-deck-v1:"
_DEALER_DOMAIN_PREFIX = b"hanafuda-dealer-v1:"
_LAYOUT_DOMAIN_PREFIX = b"hanafuda-layout-v1:"

# PCG64DXSM constants
_PCG_MULTIPLIER = 0x2360ED051FC65DA44385DF649FCCF645
_PCG_DXSM_MUL = 0xDA942042E4DD58B5
_UINT128_MASK = (1 << 128) - 1
_UINT64_MASK = (1 << 64) - 1


def validate_seed_hex(seed_hex: str) -> None:
    """Validate that a seed string is the correct hex format.

    Enforces exact length (64 hex chars = 32 bytes) and valid hex characters.
    Raises TypeError for non-string input, ValueError for invalid format.
    """
    if not isinstance(seed_hex, str):
        raise TypeError(f"Seed must be a string, got {type(seed_hex).__name__}")
    expected_length = SEED_BYTES * 2
    if len(seed_hex) != expected_length:
        raise ValueError(f"Seed must be exactly {expected_length} hex characters, got {len(seed_hex)}")
    try:
        bytes.fromhex(seed_hex)
    except ValueError:
        raise ValueError("Seed contains invalid hex characters") from None


class PCG64DXSM:
    """
    Pure Python PCG64DXSM (Permuted Congruential Generator).

    128-bit LCG state with the full 128-bit multiplier and the DXSM
    (double-xorshift-multiply) output permutation for 64-bit output.
    """

    def __init__(self, state: int, increment: int) -> None:
        self._inc = ((increment << 1) | 1) & _UINT128_MASK  # increment must be odd
        self._state = (state + self._inc) & _UINT128_MASK
        self._state = (self._state * _PCG_MULTIPLIER + self._inc) & _UINT128_MASK
        self._state = (self._state * _PCG_MULTIPLIER + self._inc) & _UINT128_MASK

    def next_uint64(self) -> int:
        """Generate the next 64-bit unsigned integer and advance state."""
        state = self._state
        hi = (state >> 64) & _UINT64_MASK
        lo = (state & _UINT64_MASK) | 1

        hi ^= hi >> 32
        hi = (hi * _PCG_DXSM_MUL) & _UINT64_MASK
        hi ^= hi >> 48
        hi = (hi * lo) & _UINT64_MASK

        self._state = (state * _PCG_MULTIPLIER + self._inc) & _UINT128_MASK
        return hi


def generate_seed() -> str:
    """Generate a cryptographic seed as a hex string (64 chars / 256 bits)."""
    return secrets.token_bytes(SEED_BYTES).hex()


def _derive_pcg(domain_prefix: bytes, data: bytes) -> PCG64DXSM:
    """
    Derive a PCG64DXSM from SHA512 hash of domain-separated data.

    The first 16 bytes of the digest become the PCG state and the next
    16 bytes become the increment.
    """
    derived = hashlib.sha512(domain_prefix + data).digest()
    state = int.from_bytes(derived[:16], byteorder="little")
    increment = int.from_bytes(derived[16:32], byteorder="little")
    return PCG64DXSM(state, increment)


def _derive_round_pcg(seed_hex: str, round_number: int) -> PCG64DXSM:
    """Derive a per-round PCG64DXSM from the match seed."""
    if not (0 <= round_number < 2**32):
        raise ValueError("round_number must be in [0, 2^32)")
    validate_seed_hex(seed_hex)
    seed_bytes = bytes.fromhex(seed_hex)
    round_bytes = round_number.to_bytes(4, byteorder="little")
    return _derive_pcg(_DOMAIN_PREFIX, seed_bytes + round_bytes)


def _bounded_uint64(pcg: PCG64DXSM, bound: int) -> int:
    """
    Generate an unbiased random integer in [0, bound) via rejection sampling.

    Values from the partial final bucket are rejected to remove modulo bias.
    """
    if bound <= 0 or bound > (1 << 64):
        raise ValueError("bound must be in (0, 2^64]")
    limit = (1 << 64) - ((1 << 64) % bound)
    while True:
        r = pcg.next_uint64()
        if r < limit:
            return r % bound


def _fisher_yates_shuffle(cards: list[int], pcg: PCG64DXSM) -> list[int]:
    """Fisher-Yates (Knuth) shuffle: for i in 0..n-2 swap cards[i] with cards[i + bounded(n - i)]."""
    n = len(cards)
    result = list(cards)
    for i in range(n - 1):
        j = i + _bounded_uint64(pcg, n - i)
        result[i], result[j] = result[j], result[i]
    return result


def generate_shuffled_deck(seed_hex: str, round_number: int) -> list[int]:
    """Return the 48 card ids in draw order for the given round."""
    pcg = _derive_round_pcg(seed_hex, round_number)
    return _fisher_yates_shuffle(list(ALL_CARD_IDS), pcg)


def generate_match_layout(seed_hex: str) -> list[int]:
    """Return the face-down layout order for the concentration game."""
    validate_seed_hex(seed_hex)
    pcg = _derive_pcg(_LAYOUT_DOMAIN_PREFIX, bytes.fromhex(seed_hex))
    return _fisher_yates_shuffle(list(ALL_CARD_IDS), pcg)


def determine_first_dealer(seed_hex: str, num_players: int) -> tuple[int, tuple[int, ...]]:
    """
    Determine the first dealer by drawing one card per player.

    Mirrors the table procedure: each player draws a card from a freshly
    shuffled deck and the earliest month deals; within the same month the
    lower card id wins. Uses a dealer stream independent from the deck stream.

    Return (dealer_seat, drawn_card_ids).
    """
    validate_seed_hex(seed_hex)
    pcg = _derive_pcg(_DEALER_DOMAIN_PREFIX, bytes.fromhex(seed_hex))
    shuffled = _fisher_yates_shuffle(list(ALL_CARD_IDS), pcg)
    drawn = tuple(shuffled[:num_players])
    dealer = min(range(num_players), key=lambda seat: (card_month(drawn[seat]), drawn[seat]))
    return dealer, drawn
