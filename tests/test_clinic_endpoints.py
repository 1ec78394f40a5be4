"""Tests for the clinic, doctor, patient and appointment endpoints."""

from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from doutor_agenda.models import appointments, doctors, patients, users_to_clinics


async def other_user_headers(client: AsyncClient) -> dict:
    response = await client.post(
        "/api/v1/auth/sign-up/email",
        json={"name": "Intruso", "email": "intruso@example.com", "password": "outra-senha"},
    )
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}


async def create_doctor(client, clinic, headers, data) -> dict:
    response = await client.post(
        f"/api/v1/clinics/{clinic['id']}/doctors/", json=data, headers=headers
    )
    assert response.status_code == 201
    return response.json()


async def create_patient(client, clinic, headers, data) -> dict:
    response = await client.post(
        f"/api/v1/clinics/{clinic['id']}/patients/", json=data, headers=headers
    )
    assert response.status_code == 201
    return response.json()


async def create_appointment(client, clinic, headers, doctor, patient, date) -> dict:
    response = await client.post(
        f"/api/v1/clinics/{clinic['id']}/appointments/",
        json={"date": date, "doctor_id": doctor["id"], "patient_id": patient["id"]},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


# ----------------------------------------------------------------------
# Clinics
# ----------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_clinic(client, db_session, signed_up, auth_headers):
    """Test that creating a clinic makes the creator a member."""
    response = await client.post(
        "/api/v1/clinics/", json={"name": "Clínica Norte"}, headers=auth_headers
    )

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Clínica Norte"
    assert "id" in data

    membership = (
        await db_session.execute(
            select(func.count())
            .select_from(users_to_clinics)
            .where(users_to_clinics.c.user_id == signed_up["user"]["id"])
        )
    ).scalar_one()
    assert membership == 1


@pytest.mark.asyncio
async def test_create_clinic_requires_auth(client):
    response = await client.post("/api/v1/clinics/", json={"name": "Sem dono"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_clinic_empty_name(client, auth_headers):
    response = await client.post("/api/v1/clinics/", json={"name": ""}, headers=auth_headers)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_clinics(client, auth_headers, clinic):
    """Test listing only the caller's clinics."""
    response = await client.get("/api/v1/clinics/", headers=auth_headers)

    assert response.status_code == 200
    assert [c["id"] for c in response.json()] == [clinic["id"]]

    headers = await other_user_headers(client)
    response = await client.get("/api/v1/clinics/", headers=headers)
    assert response.json() == []


@pytest.mark.asyncio
async def test_get_clinic(client, auth_headers, clinic):
    response = await client.get(f"/api/v1/clinics/{clinic['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["name"] == clinic["name"]


@pytest.mark.asyncio
async def test_get_clinic_not_found(client, auth_headers):
    response = await client.get(f"/api/v1/clinics/{uuid4()}", headers=auth_headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_get_clinic_non_member_forbidden(client, clinic):
    """Test that users outside the clinic cannot read it."""
    headers = await other_user_headers(client)

    response = await client.get(f"/api/v1/clinics/{clinic['id']}", headers=headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_update_clinic(client, auth_headers, clinic):
    response = await client.patch(
        f"/api/v1/clinics/{clinic['id']}", json={"name": "Nova Clínica"}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Nova Clínica"


@pytest.mark.asyncio
async def test_delete_clinic_cascades(
    client, db_session, auth_headers, clinic, sample_doctor_data, sample_patient_data
):
    """Test that deleting a clinic removes everything under it."""
    doctor = await create_doctor(client, clinic, auth_headers, sample_doctor_data)
    patient = await create_patient(client, clinic, auth_headers, sample_patient_data)
    await create_appointment(
        client, clinic, auth_headers, doctor, patient, "2026-11-03T10:00:00Z"
    )

    response = await client.delete(f"/api/v1/clinics/{clinic['id']}", headers=auth_headers)
    assert response.status_code == 204

    for table in (doctors, patients, appointments, users_to_clinics):
        remaining = (
            await db_session.execute(select(func.count()).select_from(table))
        ).scalar_one()
        assert remaining == 0

    response = await client.get(f"/api/v1/clinics/{clinic['id']}", headers=auth_headers)
    assert response.status_code == 404


# ----------------------------------------------------------------------
# Doctors
# ----------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_doctor(client, auth_headers, clinic, sample_doctor_data):
    response = await client.post(
        f"/api/v1/clinics/{clinic['id']}/doctors/", json=sample_doctor_data, headers=auth_headers
    )

    assert response.status_code == 201
    data = response.json()
    assert data["clinic_id"] == clinic["id"]
    assert data["available_from_weekday"] == 1
    assert data["available_from_time"] == "08:00:00"
    assert data["appointment_price_in_cents"] == 25000


@pytest.mark.asyncio
@pytest.mark.parametrize("weekday", [-1, 7])
async def test_create_doctor_invalid_weekday(
    client, auth_headers, clinic, sample_doctor_data, weekday
):
    """Test that weekdays outside 0-6 are rejected."""
    sample_doctor_data["available_to_weekday"] = weekday
    response = await client.post(
        f"/api/v1/clinics/{clinic['id']}/doctors/", json=sample_doctor_data, headers=auth_headers
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_doctor_inverted_hours(client, auth_headers, clinic, sample_doctor_data):
    sample_doctor_data["available_to_time"] = "07:00:00"
    response = await client.post(
        f"/api/v1/clinics/{clinic['id']}/doctors/", json=sample_doctor_data, headers=auth_headers
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_doctor_negative_price(client, auth_headers, clinic, sample_doctor_data):
    sample_doctor_data["appointment_price_in_cents"] = -1
    response = await client.post(
        f"/api/v1/clinics/{clinic['id']}/doctors/", json=sample_doctor_data, headers=auth_headers
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_doctors_by_specialty(client, auth_headers, clinic, sample_doctor_data):
    """Test the specialty filter."""
    await create_doctor(client, clinic, auth_headers, sample_doctor_data)
    await create_doctor(
        client,
        clinic,
        auth_headers,
        {**sample_doctor_data, "name": "Dra. Paula", "specialty": "Pediatria"},
    )

    response = await client.get(
        f"/api/v1/clinics/{clinic['id']}/doctors/", headers=auth_headers
    )
    assert len(response.json()) == 2

    response = await client.get(
        f"/api/v1/clinics/{clinic['id']}/doctors/",
        params={"specialty": "pediatria"},
        headers=auth_headers,
    )
    assert [d["name"] for d in response.json()] == ["Dra. Paula"]


@pytest.mark.asyncio
async def test_update_doctor(client, auth_headers, clinic, sample_doctor_data):
    doctor = await create_doctor(client, clinic, auth_headers, sample_doctor_data)

    response = await client.patch(
        f"/api/v1/clinics/{clinic['id']}/doctors/{doctor['id']}",
        json={"appointment_price_in_cents": 30000},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["appointment_price_in_cents"] == 30000
    assert response.json()["name"] == sample_doctor_data["name"]


@pytest.mark.asyncio
async def test_update_doctor_inverted_hours(client, auth_headers, clinic, sample_doctor_data):
    """Test that a partial update cannot end availability before it starts."""
    doctor = await create_doctor(client, clinic, auth_headers, sample_doctor_data)

    response = await client.patch(
        f"/api/v1/clinics/{clinic['id']}/doctors/{doctor['id']}",
        json={"available_to_time": "07:00:00"},
        headers=auth_headers,
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_doctor_clears_avatar(client, auth_headers, clinic, sample_doctor_data):
    """Test that a nullable field can be reset with an explicit null."""
    doctor = await create_doctor(
        client,
        clinic,
        auth_headers,
        {**sample_doctor_data, "avatar_image_url": "https://example.com/avatar.png"},
    )

    response = await client.patch(
        f"/api/v1/clinics/{clinic['id']}/doctors/{doctor['id']}",
        json={"avatar_image_url": None, "name": None},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["avatar_image_url"] is None
    assert response.json()["name"] == sample_doctor_data["name"]


@pytest.mark.asyncio
async def test_list_doctors_wildcards_match_literally(
    client, auth_headers, clinic, sample_doctor_data
):
    """Test that % and _ in the specialty filter are not treated as wildcards."""
    await create_doctor(client, clinic, auth_headers, sample_doctor_data)
    await create_doctor(
        client,
        clinic,
        auth_headers,
        {**sample_doctor_data, "name": "Dr. Rui", "specialty": "Clínica_Geral"},
    )
    url = f"/api/v1/clinics/{clinic['id']}/doctors/"

    response = await client.get(url, params={"specialty": "%"}, headers=auth_headers)
    assert response.json() == []

    response = await client.get(url, params={"specialty": "_"}, headers=auth_headers)
    assert [d["name"] for d in response.json()] == ["Dr. Rui"]


@pytest.mark.asyncio
async def test_list_patients_wildcards_match_literally(
    client, auth_headers, clinic, sample_patient_data
):
    await create_patient(client, clinic, auth_headers, sample_patient_data)
    await create_patient(
        client,
        clinic,
        auth_headers,
        {**sample_patient_data, "name": "Ana 100% Silva", "email": "ana@example.com"},
    )
    url = f"/api/v1/clinics/{clinic['id']}/patients/"

    response = await client.get(url, params={"search": "0%"}, headers=auth_headers)
    assert [p["name"] for p in response.json()] == ["Ana 100% Silva"]

    response = await client.get(url, params={"search": "_"}, headers=auth_headers)
    assert response.json() == []


@pytest.mark.asyncio
async def test_get_doctor_from_other_clinic(client, auth_headers, clinic, sample_doctor_data):
    """Test that doctors are only reachable through their own clinic."""
    doctor = await create_doctor(client, clinic, auth_headers, sample_doctor_data)
    other = await client.post("/api/v1/clinics/", json={"name": "Outra"}, headers=auth_headers)

    response = await client.get(
        f"/api/v1/clinics/{other.json()['id']}/doctors/{doctor['id']}", headers=auth_headers
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_doctor(client, auth_headers, clinic, sample_doctor_data):
    doctor = await create_doctor(client, clinic, auth_headers, sample_doctor_data)

    response = await client.delete(
        f"/api/v1/clinics/{clinic['id']}/doctors/{doctor['id']}", headers=auth_headers
    )
    assert response.status_code == 204

    response = await client.get(
        f"/api/v1/clinics/{clinic['id']}/doctors/{doctor['id']}", headers=auth_headers
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_doctor_with_appointments(
    client, auth_headers, clinic, sample_doctor_data, sample_patient_data
):
    """Test that a doctor with appointments cannot be deleted."""
    doctor = await create_doctor(client, clinic, auth_headers, sample_doctor_data)
    patient = await create_patient(client, clinic, auth_headers, sample_patient_data)
    await create_appointment(
        client, clinic, auth_headers, doctor, patient, "2026-11-03T10:00:00Z"
    )

    response = await client.delete(
        f"/api/v1/clinics/{clinic['id']}/doctors/{doctor['id']}", headers=auth_headers
    )

    assert response.status_code == 409


# ----------------------------------------------------------------------
# Patients
# ----------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_patient(client, auth_headers, clinic, sample_patient_data):
    response = await client.post(
        f"/api/v1/clinics/{clinic['id']}/patients/",
        json=sample_patient_data,
        headers=auth_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["sex"] == "male"
    assert data["clinic_id"] == clinic["id"]


@pytest.mark.asyncio
async def test_create_patient_invalid_sex(client, auth_headers, clinic, sample_patient_data):
    sample_patient_data["sex"] = "other"
    response = await client.post(
        f"/api/v1/clinics/{clinic['id']}/patients/",
        json=sample_patient_data,
        headers=auth_headers,
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_and_delete_patient(client, auth_headers, clinic, sample_patient_data):
    patient = await create_patient(client, clinic, auth_headers, sample_patient_data)
    url = f"/api/v1/clinics/{clinic['id']}/patients/{patient['id']}"

    response = await client.patch(url, json={"phone": "+5511912345678"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["phone"] == "+5511912345678"

    response = await client.delete(url, headers=auth_headers)
    assert response.status_code == 204

    response = await client.get(url, headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_patients_forbidden_for_non_member(client, clinic, sample_patient_data):
    headers = await other_user_headers(client)

    response = await client.post(
        f"/api/v1/clinics/{clinic['id']}/patients/", json=sample_patient_data, headers=headers
    )

    assert response.status_code == 403


# ----------------------------------------------------------------------
# Appointments
# ----------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_appointment(
    client, auth_headers, clinic, sample_doctor_data, sample_patient_data
):
    doctor = await create_doctor(client, clinic, auth_headers, sample_doctor_data)
    patient = await create_patient(client, clinic, auth_headers, sample_patient_data)

    appointment = await create_appointment(
        client, clinic, auth_headers, doctor, patient, "2026-11-03T10:00:00Z"
    )

    assert appointment["doctor_id"] == doctor["id"]
    assert appointment["patient_id"] == patient["id"]
    assert appointment["clinic_id"] == clinic["id"]


@pytest.mark.asyncio
async def test_create_appointment_missing_doctor(
    client, auth_headers, clinic, sample_patient_data
):
    """Test that an appointment needs an existing doctor."""
    patient = await create_patient(client, clinic, auth_headers, sample_patient_data)

    response = await client.post(
        f"/api/v1/clinics/{clinic['id']}/appointments/",
        json={
            "date": "2026-11-03T10:00:00Z",
            "doctor_id": str(uuid4()),
            "patient_id": patient["id"],
        },
        headers=auth_headers,
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Doctor not found"


@pytest.mark.asyncio
async def test_create_appointment_missing_patient(
    client, auth_headers, clinic, sample_doctor_data
):
    doctor = await create_doctor(client, clinic, auth_headers, sample_doctor_data)

    response = await client.post(
        f"/api/v1/clinics/{clinic['id']}/appointments/",
        json={
            "date": "2026-11-03T10:00:00Z",
            "doctor_id": doctor["id"],
            "patient_id": str(uuid4()),
        },
        headers=auth_headers,
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Patient not found"


@pytest.mark.asyncio
async def test_list_appointments_filters(
    client, auth_headers, clinic, sample_doctor_data, sample_patient_data
):
    """Test ordering, doctor filter and pagination."""
    doctor = await create_doctor(client, clinic, auth_headers, sample_doctor_data)
    other_doctor = await create_doctor(
        client, clinic, auth_headers, {**sample_doctor_data, "name": "Dra. Paula"}
    )
    patient = await create_patient(client, clinic, auth_headers, sample_patient_data)

    await create_appointment(client, clinic, auth_headers, doctor, patient, "2026-11-05T10:00:00Z")
    await create_appointment(client, clinic, auth_headers, doctor, patient, "2026-11-03T10:00:00Z")
    await create_appointment(
        client, clinic, auth_headers, other_doctor, patient, "2026-11-04T10:00:00Z"
    )

    url = f"/api/v1/clinics/{clinic['id']}/appointments/"

    response = await client.get(url, headers=auth_headers)
    data = response.json()
    assert data["total"] == 3
    dates = [a["date"][:10] for a in data["items"]]
    assert dates == ["2026-11-03", "2026-11-04", "2026-11-05"]

    response = await client.get(url, params={"doctor_id": doctor["id"]}, headers=auth_headers)
    assert response.json()["total"] == 2

    response = await client.get(url, params={"page": 2, "page_size": 2}, headers=auth_headers)
    data = response.json()
    assert data["page"] == 2
    assert len(data["items"]) == 1


@pytest.mark.asyncio
async def test_update_and_delete_appointment(
    client, auth_headers, clinic, sample_doctor_data, sample_patient_data
):
    doctor = await create_doctor(client, clinic, auth_headers, sample_doctor_data)
    patient = await create_patient(client, clinic, auth_headers, sample_patient_data)
    appointment = await create_appointment(
        client, clinic, auth_headers, doctor, patient, "2026-11-03T10:00:00Z"
    )
    url = f"/api/v1/clinics/{clinic['id']}/appointments/{appointment['id']}"

    response = await client.patch(
        url, json={"date": "2026-11-10T14:30:00Z"}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["date"].startswith("2026-11-10T14:30:00")

    response = await client.delete(url, headers=auth_headers)
    assert response.status_code == 204

    response = await client.delete(url, headers=auth_headers)
    assert response.status_code == 404
