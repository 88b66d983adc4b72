def test_objects_require_auth(client, connector):
    resp = client.get("/api/salesforce/objects")

    assert resp.status_code == 401
    assert resp.json() == {"error": "Not authenticated"}
    assert connector.calls == []


def test_fields_require_auth(client, connector):
    resp = client.get("/api/salesforce/objects/Account/fields")

    assert resp.status_code == 401
    assert connector.calls == []


def test_objects_are_filtered_and_sorted_by_label(auth_client, connector):
    connector.global_describe = {
        "sobjects": [
            {"name": "Opportunity", "label": "Opportunity", "custom": False, "createable": True, "updateable": True},
            {"name": "Invoice__c", "label": "invoice", "custom": True, "createable": True, "updateable": True},
            {"name": "ApexLog", "label": "Apex Debug Log", "custom": False, "createable": False, "updateable": True},
            {"name": "Account", "label": "Account", "custom": False, "createable": True, "updateable": True},
            {"name": "LoginHistory", "label": "Login History", "custom": False, "createable": True, "updateable": False},
            {"name": "Contact", "label": "Contact", "custom": False, "createable": True, "updateable": True},
        ]
    }

    resp = auth_client.get("/api/salesforce/objects")

    assert resp.status_code == 200
    assert resp.json() == [
        {"name": "Account", "label": "Account", "custom": False},
        {"name": "Contact", "label": "Contact", "custom": False},
        {"name": "Invoice__c", "label": "invoice", "custom": True},
        {"name": "Opportunity", "label": "Opportunity", "custom": False},
    ]
    assert connector.call_names == ["describe_global"]


def test_objects_adapter_failure(auth_client, connector):
    connector.error = RuntimeError("REQUEST_LIMIT_EXCEEDED")

    resp = auth_client.get("/api/salesforce/objects")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to fetch Salesforce objects"}


def test_fields_projection(auth_client, connector):
    picklist = [{"value": "Hot", "label": "Hot", "active": True, "defaultValue": False}]
    connector.object_describe = {
        "fields": [
            {"name": "Rating", "label": "Rating", "type": "picklist", "createable": True, "updateable": True,
             "nillable": True, "defaultedOnCreate": False, "picklistValues": picklist},
            {"name": "Name", "label": "Account Name", "type": "string", "createable": True, "updateable": True,
             "nillable": False, "defaultedOnCreate": False, "picklistValues": []},
            {"name": "OwnerId", "label": "Owner ID", "type": "reference", "createable": True, "updateable": True,
             "nillable": False, "defaultedOnCreate": True, "picklistValues": []},
            {"name": "CreatedDate", "label": "Created Date", "type": "datetime", "createable": False,
             "updateable": False, "nillable": False, "defaultedOnCreate": True, "picklistValues": []},
            {"name": "External_Id__c", "label": "External Id", "type": "string", "createable": False,
             "updateable": True, "nillable": True, "defaultedOnCreate": False, "picklistValues": []},
        ]
    }

    resp = auth_client.get("/api/salesforce/objects/Account/fields")

    assert resp.status_code == 200
    assert resp.json() == [
        {"name": "Name", "label": "Account Name", "type": "string", "required": True, "picklistValues": []},
        {"name": "External_Id__c", "label": "External Id", "type": "string", "required": False, "picklistValues": []},
        {"name": "OwnerId", "label": "Owner ID", "type": "reference", "required": False, "picklistValues": []},
        {"name": "Rating", "label": "Rating", "type": "picklist", "required": False, "picklistValues": picklist},
    ]
    assert connector.calls == [("describe", "Account")]


def test_fields_adapter_failure(auth_client, connector):
    connector.error = RuntimeError("NOT_FOUND")

    resp = auth_client.get("/api/salesforce/objects/Nope__c/fields")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to fetch object fields"}
