from src.id_generator import generate_public_id, id_factory, parse_public_id, validate_public_id


def test_generated_ids_validate():
    public_id = generate_public_id("post")
    assert public_id.startswith("PST-")
    assert validate_public_id(public_id, "PST")
    assert not validate_public_id(public_id, "USR")


def test_parse_roundtrip_fields():
    parsed = parse_public_id("USR-1699564234-A7K9M2QX")
    assert parsed["resource_type"] == "user"
    assert parsed["timestamp"] == 1699564234


def test_malformed_ids_rejected():
    assert not validate_public_id("USR-123")
    assert not validate_public_id("usr-1699564234-A7K9M2QX")
    assert not validate_public_id("USR-1699564234-SHORT")


def test_factory_produces_unique_ids():
    make = id_factory("review")
    assert len({make() for _ in range(50)}) == 50
