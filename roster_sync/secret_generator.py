"""
Generates the simple, memorable passwords handed to new students.

A secret has the form ``<Word>.<NNNN>``, e.g. ``Otter.0427``. The word
is drawn uniformly from `WORD_LIST` and the number uniformly from
0-9999, zero-padded to four digits. That gives
``len(WORD_LIST) * 10000`` possible secrets. These are meant to be typed
by young children and are not high-entropy; accounts relying on them
should sit behind the directory's own lockout policy.
"""

from typing import Sequence
import random

WORD_LIST = (
    # animals
    'Ant', 'Badger', 'Bear', 'Beaver', 'Bee', 'Bison', 'Camel', 'Cat',
    'Cheetah', 'Crab', 'Crane', 'Deer', 'Dingo', 'Dog', 'Dolphin', 'Duck',
    'Eagle', 'Echidna', 'Emu', 'Falcon', 'Ferret', 'Finch', 'Fox', 'Frog',
    'Gecko', 'Giraffe', 'Goat', 'Goose', 'Hawk', 'Hippo', 'Horse', 'Koala',
    'Lemur', 'Lion', 'Lizard', 'Llama', 'Magpie', 'Moose', 'Mouse', 'Newt',
    'Octopus', 'Otter', 'Owl', 'Panda', 'Parrot', 'Pelican', 'Penguin',
    'Possum', 'Puffin', 'Rabbit', 'Robin', 'Seal', 'Shark', 'Sloth', 'Snail',
    'Swan', 'Tiger', 'Turtle', 'Walrus', 'Wombat', 'Zebra',
    # colours
    'Amber', 'Aqua', 'Black', 'Blue', 'Bronze', 'Coral', 'Crimson', 'Gold',
    'Green', 'Indigo', 'Ivory', 'Lemon', 'Lilac', 'Maroon', 'Navy', 'Olive',
    'Orange', 'Pink', 'Purple', 'Red', 'Ruby', 'Silver', 'Teal', 'Violet',
    'White', 'Yellow',
    # things
    'Anchor', 'Apple', 'Banana', 'Basket', 'Bell', 'Boat', 'Book', 'Bridge',
    'Brush', 'Bucket', 'Button', 'Candle', 'Castle', 'Cherry', 'Cloud',
    'Comet', 'Cookie', 'Crayon', 'Drum', 'Feather', 'Flag', 'Garden',
    'Guitar', 'Hammer', 'Kettle', 'Kite', 'Ladder', 'Lamp', 'Mango', 'Marble',
    'Mitten', 'Moon', 'Pear', 'Pencil', 'Piano', 'Pillow', 'Planet',
    'Plum', 'Pocket', 'Puzzle', 'Rainbow', 'River', 'Rocket', 'Sandal',
    'Shell', 'Spoon', 'Star', 'Sunset', 'Teapot', 'Tent', 'Tractor',
    'Trumpet', 'Tulip', 'Wagon', 'Whistle', 'Window'
)
MAX_NUMBER = 9999


class SecretGenerator(object):

    """
    Produces secrets from an injectable random source. Pass a seeded
    :class:`random.Random` for reproducible output; the default is
    :class:`random.SystemRandom`.
    """

    def __init__(self, rng: random.Random = None,
                 words: Sequence[str] = WORD_LIST):
        if not words:
            raise ValueError('Word list must not be empty.')
        self.rng = rng if rng is not None else random.SystemRandom()
        self.words = tuple(words)

    def generate(self) -> str:
        word = self.rng.choice(self.words)
        number = self.rng.randint(0, MAX_NUMBER)
        return f'{word}.{number:04d}'

    __call__ = generate

    @property
    def space_size(self) -> int:
        """How many distinct secrets this generator can produce."""
        return len(self.words) * (MAX_NUMBER + 1)


def generate_secret(rng: random.Random = None) -> str:
    return SecretGenerator(rng=rng).generate()
