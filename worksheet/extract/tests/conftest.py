from __future__ import annotations

from typing import List

import pytest

# A free-form document: questions as headings, one answer each.
FLOW_DOC = """Reflection notes
What am I most proud of?
Raising two kind and curious children.

What makes me happiest in life?
Long walks on the beach with my family.
MY VALUES - what matters most to me?
Honesty and generosity guide my choices.
What will be different for you?
I will finish my work before dinner every day.
WORKSHOP ONE ACTIONS / COMMITMENTS
Block two hours of focus time each morning.
What am I learning?
Small routines compound into big results.
"""

# The printed worksheet template as it comes out of the converter.
TABLE_DOC = """PRODUCTIVITY SUPERHERO WORKSHEET
MY PERSONAL VALUES
What am I most proud of?
1. Raising two kind children
2. Finishing my degree
3. Running a marathon
What did it take for me to achieve those things?
1. Patience and persistence
2. Late nights studying
What makes me happiest in life?
1. Walks with my family
Who do I find inspiring...and then, what are the qualities I am admiring?
1. My grandmother for her courage
MY VALUES - what matters most to me?
Family comes first
Growth over comfort
MY PRODUCTIVITY - how does it link to my values?
More focus means more evenings with my family
MY GOALS - what do I want to achieve
What will be different for you?
I will leave work on time every day
How will you feel?
Calm and in control
Who benefits?
My kids and my team
I want to improve my productivity because
I want more time for my hobbies
WORKSHOP ONE ACTIONS / COMMITMENTS
1. Plan tomorrow each evening
2. Turn off notifications
What am I learning?
Small habits add up
"""


@pytest.fixture
def flow_doc() -> str:
    return FLOW_DOC


@pytest.fixture
def table_doc() -> str:
    return TABLE_DOC


@pytest.fixture
def table_lines() -> List[str]:
    return [ln for ln in TABLE_DOC.splitlines() if ln.strip()]
