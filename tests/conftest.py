"""Pytest configuration for nwscript-symbols tests."""

import pytest

SAMPLE_SCRIPT = """\
// Engine declarations
#define ENGINE_STRUCTURE_0 effect
#define ENGINE_STRUCTURE_1 event

int    TRUE                     = 1;
int    FALSE                    = 0;
float  PI                       = 3.141592;
string HELLO = "Hello, world;";
const int MAX_LEVEL = 40;

/*
 * Returns the first player character.
 */
object GetFirstPC(int bExploreMode = TRUE);
void ApplyEffect(effect eEffect, object oTarget = OBJECT_SELF, float fDuration = 0.0f);
vector Vec(float x = 0.0, float y = 0.0);

void main()
{
    int nLocal = 5;
    return GetFirstPC();
}
"""


@pytest.fixture
def sample_script() -> str:
    """Script text with engine structures, prototypes, constants and a definition."""
    return SAMPLE_SCRIPT


@pytest.fixture
def sample_bytes(sample_script: str) -> bytes:
    """The sample script as plain ASCII bytes."""
    return sample_script.encode("ascii")
