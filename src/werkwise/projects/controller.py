from __future__ import annotations

from flask import Flask, request

from ..common.web import current_role, current_user_id, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/projects", endpoint="list_projects")
    @login_required
    def list_projects():
        projects = container.project_service.list_projects(status=request.args.get("status"))
        return ok({"projects": [p.to_dict() for p in projects]})

    @app.route("/api/projects", methods=["POST"], endpoint="create_project")
    @login_required
    def create_project():
        project_id = container.project_service.create_project(current_role=current_role(), data=json_body())
        return ok({"id": project_id, "message": "Project aangemaakt"}, 201)

    @app.route("/api/projects/<int:project_id>", endpoint="get_project")
    @login_required
    def get_project(project_id: int):
        details = container.project_service.project_details(
            project_id, current_role=current_role(), current_user_id=current_user_id()
        )
        return ok(details.to_dict())

    @app.route("/api/projects/<int:project_id>", methods=["PUT"], endpoint="update_project")
    @login_required
    def update_project(project_id: int):
        container.project_service.update_project(current_role=current_role(), project_id=project_id, data=json_body())
        return ok({"message": "Project bijgewerkt"})

    @app.route("/api/projects/<int:project_id>", methods=["DELETE"], endpoint="delete_project")
    @login_required
    def delete_project(project_id: int):
        container.project_service.delete_project(current_role=current_role(), project_id=project_id)
        return ok({"message": "Project verwijderd"})
