from __future__ import annotations

import pytest

SAMPLE_TEXT = """REPORT
ID: A1
REPORTDATE: 3/ /1998
PERSONS: Alice
ORGANIZATIONS: OrgX
PLACES: Region1/District1/CityA
REPORTDESCRIPTION: Alice met with OrgX
representatives in CityA.
REPORT
ID: A2
REPORTDATE: 4/12/1998
PERSONS: Alice
ORGANIZATIONS: OrgY
PLACES: CityA
REPORTDESCRIPTION: Alice wired money to OrgY.
"""

ALIAS_TEXT = """REPORT
ID: B1
REPORTDATE: 1/5/2001
PERSONS: Boris; Boris Bugarov; Pyotr
ORGANIZATIONS: Cartel
PLACES: North / Lowtown / Harbor / Dock 4; ; Harbor
REPORTDESCRIPTION: Boris and Pyotr met at the dock.
REPORT
PERSONS: Nobody
REPORTDESCRIPTION: This block has no id and is dropped.
REPORT
ID: B2
REPORTDATE:   /   /2001
PERSONS: Sofrygin; Yazid Bafaba
PLACES: Harbor; /
REPORTDESCRIPTION: Sofrygin called Yazid Bafaba.
REPORT
ID: B3
REPORTDATE: not a date
PERSONS:
ORGANIZATIONS: Cartel; Front Co
PLACES: Uptown
REPORTDESCRIPTION: Cartel used Front Co.
"""


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_TEXT


@pytest.fixture
def alias_text() -> str:
    return ALIAS_TEXT
