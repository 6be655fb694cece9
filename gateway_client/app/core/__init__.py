SERVICE_NAME = "gateway_client"
