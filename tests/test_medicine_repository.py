import io

from components.medicine.repository import MedicinePriceRepository

HEADER = "medicine_name\tmonthly_cost\tdisease_type\n"


def _csv(*rows):
    return io.BytesIO((HEADER + "".join(r + "\n" for r in rows)).encode("utf-8"))


def test_upload_valid_price_list(run_db):
    async def body(session):
        repo = MedicinePriceRepository(session)
        success, message, errors = await repo.upload_prices_from_csv(
            _csv("Metformin 500\t180.00\tDiabetes", "Amlodipine\t120\tHypertension")
        )
        assert success and errors == []

        price = await repo.find_by_keyword("metformin")
        assert price.medicine_name == "Metformin 500"
        assert float(price.monthly_cost) == 180.00
        assert await repo.find_by_keyword("insulin") is None

    run_db(body)


def test_upload_rejects_whole_file_on_bad_row(run_db):
    async def body(session):
        repo = MedicinePriceRepository(session)
        success, message, errors = await repo.upload_prices_from_csv(
            _csv("Metformin\t180\tDiabetes", "Insulin\tabc\tDiabetes", "metformin\t10\tDiabetes", "Aspirin\t-1\tCardiac")
        )
        assert not success
        assert [e["row"] for e in errors] == [3, 4, 5]
        assert await repo.get_all() == []

    run_db(body)


def test_upload_requires_columns(run_db):
    async def body(session):
        repo = MedicinePriceRepository(session)
        success, message, _ = await repo.upload_prices_from_csv(io.BytesIO(b"name\tprice\nMetformin\t10\n"))
        assert not success
        assert "medicine_name" in message

    run_db(body)
