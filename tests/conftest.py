import pytest

from oh_risk import create_lifting_task, create_oel_entry, create_substance, create_work_task


@pytest.fixture(scope="session")
def example_values() -> list:
    """
    Six log-normally distributed readings in mg/m3 (OELV 0.5 mg/m3).
    """
    return [0.12, 0.34, 0.28, 0.45, 0.19, 0.31]


@pytest.fixture
def toluene():
    return create_substance(
        id="toluene",
        name="Toluene",
        aggregate_state="vapor-liquid",
        vapour_pressure=2.9,
        vapour_pressure_unit="kPa",
        oels=[
            create_oel_entry(384, unit="mg/m3", period="15min"),
            create_oel_entry(150, unit="mg/m3", period="8h-twa"),
        ],
    )


@pytest.fixture
def quartz_dust():
    return create_substance(
        id="quartz",
        name="Respirable crystalline silica",
        aggregate_state="solid-powder",
        dustiness="medium",
        oels=[create_oel_entry(0.075, unit="mg/m3")],
    )


@pytest.fixture
def sanding_task():
    """
    Open handling, 1-10 kg, 4-8 h/day, point extraction in a mid-size room.
    Tier-1 index for a medium-dust powder: (5 x 1 x 5 x 0.8) / (20 x 1 x 1) = 1.0.
    """
    return create_work_task(
        id="sanding",
        process_type="open",
        quantity="1-10kg",
        duration="4-8h",
        lev="point",
        ventilation="1-3ACH",
        room_size="50-500m3",
        substance_ids=["quartz"],
    )


@pytest.fixture
def box_lift():
    """
    G=15 kg, H=40 cm, V 50 -> 100 cm, A=0, 1 lift/min, 2-8 h, fair grip.
    """
    return create_lifting_task(
        weight=15,
        h_start=40,
        v_start=50,
        v_end=100,
        frequency=1,
        duration="long",
        grip="fair",
        id="box-lift",
        group_id="warehouse",
    )
