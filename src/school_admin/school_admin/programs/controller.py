from __future__ import annotations

import logging

from flask import Flask, abort, flash, jsonify, redirect, render_template, request, url_for

from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container

LOGGER = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    programs = container.program_service
    lookups = container.lookups

    @app.route("/programs", endpoint="programs_index")
    def programs_index():
        page = programs.list_page(request.args.get("page", 1, type=int))
        return render_template("programs/index.html", programs=page, branches=lookups.branches.options())

    @app.route("/programs/create", methods=["GET", "POST"], endpoint="programs_create")
    def programs_create():
        if request.method == "POST":
            try:
                program_id, _ = programs.create_program(
                    name=request.form.get("name", ""),
                    branch_id=request.form.get("branch_id"),
                    description=request.form.get("description", ""),
                    periods=request.form.get("periods"),
                )
                flash("Program was created successfully!", "success")
                return redirect(url_for("programs_show", program_id=program_id))
            except ValidationError as e:
                flash(str(e), "danger")
            except Exception:
                LOGGER.exception("Creating program failed")
                flash("System error while creating the program", "danger")

        return render_template(
            "programs/create.html",
            form=request.form,
            subjects=lookups.subjects.options(),
            branches=lookups.branches.options(),
        )

    @app.route("/programs/<int:program_id>", methods=["GET"], endpoint="programs_show")
    def programs_show(program_id: int):
        try:
            program = programs.get(program_id)
        except NotFoundError:
            abort(404)

        return render_template(
            "programs/update.html",
            program=program,
            subjects=lookups.subjects.options(),
            branches=lookups.branches.options(),
        )

    @app.route("/programs/<int:program_id>", methods=["POST"], endpoint="programs_update")
    def programs_update(program_id: int):
        try:
            programs.update_program(
                program_id,
                name=request.form.get("name", ""),
                branch_id=request.form.get("branch_id"),
                description=request.form.get("description", ""),
                periods=request.form.get("periods"),
            )
            flash("Program was updated successfully!", "success")
        except NotFoundError:
            abort(404)
        except ValidationError as e:
            flash(str(e), "danger")
        except Exception:
            LOGGER.exception("Updating program %s failed", program_id)
            flash("System error while updating the program", "danger")

        return redirect(url_for("programs_show", program_id=program_id))

    @app.route("/programs/<int:program_id>/periods", endpoint="programs_periods")
    def programs_periods(program_id: int):
        try:
            return jsonify(programs.get_periods(program_id))
        except NotFoundError as e:
            return jsonify({"error": str(e)}), 404

    @app.route("/programs/<int:program_id>/delete", methods=["POST"], endpoint="programs_delete")
    def programs_delete(program_id: int):
        try:
            programs.delete_program(program_id)
            flash("Program was deleted successfully!", "success")
        except NotFoundError as e:
            flash(str(e), "danger")
        except Exception:
            LOGGER.exception("Deleting program %s failed", program_id)
            flash("System error while deleting the program", "danger")

        return redirect(url_for("programs_index"))
