# Overview: Service layer; business rules and database work for the blueprints and CLI.
