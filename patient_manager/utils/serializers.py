from bson import ObjectId


def serialize_object_ids(data):
    """Convert every ObjectId in a nested structure to its string form"""
    if isinstance(data, dict):
        return {k: serialize_object_ids(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [serialize_object_ids(v) for v in data]
    elif isinstance(data, ObjectId):
        return str(data)
    return data


def serialize_patient(patient):
    """Helper function to serialize patient data"""
    if not patient:
        return None

    patient_data = serialize_object_ids(dict(patient))

    # Rename _id to id, keeping it as the first key
    if "_id" in patient_data:
        patient_data = {"id": patient_data.pop("_id"), **patient_data}

    return patient_data
