import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def unitflow_bed():
    from unitflow.domain import unitflow

    bed = DomainFixture(unitflow)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(unitflow_bed):
    with unitflow_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        current_domain.event_store.store._data_reset()


@pytest.fixture()
def workstation():
    from unitflow.workstation import Workstation

    return Workstation()
