import pytest
from promverify.samples import families_from_text
from promverify.targets import TargetList
from tests.helpers.fakes import METRICS_TEXT, TARGETS_DOC, FakeClient, FakeClock


@pytest.fixture
def families():
    return families_from_text(METRICS_TEXT)


@pytest.fixture
def targets():
    return TargetList.from_dict(TARGETS_DOC)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_client():
    return FakeClient()
