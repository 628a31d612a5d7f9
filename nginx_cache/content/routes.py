import re
from datetime import datetime

from flask import Blueprint, render_template, redirect, url_for, flash, request
from flask_login import login_required, current_user

from ..extensions import db
from ..decorators import require_role, require_editor
from ..models import Post, POST_PUBLISHED, POST_STATUSES, ROLE_VIEWER
from .forms import PostForm, DeleteForm


content_bp = Blueprint("content", __name__, url_prefix="/posts")


def _slugify(text: str) -> str:
    s = re.sub(r"[^a-z0-9]+", "-", (text or "").lower()).strip("-")
    return s or "post"


def _unique_slug(base: str, exclude_id=None) -> str:
    slug = base
    n = 2
    while True:
        query = Post.query.filter(Post.slug == slug)
        if exclude_id is not None:
            query = query.filter(Post.id != exclude_id)
        if not query.first():
            return slug
        slug = f"{base}-{n}"
        n += 1


def _apply_form(post: Post, form: PostForm) -> None:
    post.title = form.title.data.strip()
    post.body = form.body.data or ""
    post.status = form.status.data
    if post.status == POST_PUBLISHED and post.published_at is None:
        post.published_at = datetime.utcnow()


@content_bp.get("/")
@login_required
@require_role(ROLE_VIEWER)
def posts_list():
    q = (request.args.get("q") or "").strip()
    status = (request.args.get("status") or "all").strip()

    query = Post.query
    if q:
        query = query.filter(db.func.lower(Post.title).contains(q.lower()))
    if status in POST_STATUSES:
        query = query.filter(Post.status == status)

    posts = query.order_by(Post.updated_at.desc()).all()
    return render_template("content/posts_list.html", posts=posts, q=q, status=status)


@content_bp.get("/new")
@content_bp.post("/new")
@login_required
@require_editor
def posts_new():
    form = PostForm()
    if form.validate_on_submit():
        base = (form.slug.data or "").strip() or _slugify(form.title.data)
        if form.slug.data and Post.query.filter_by(slug=base).first():
            flash("Another post already uses that slug.", "danger")
            return render_template("content/post_form.html", form=form, mode="create")

        post = Post(slug=_unique_slug(base), author_id=current_user.id)
        _apply_form(post, form)
        db.session.add(post)
        db.session.commit()
        flash("Post created.", "success")
        return redirect(url_for("content.posts_list"))

    return render_template("content/post_form.html", form=form, mode="create")


@content_bp.get("/<int:post_id>/edit")
@content_bp.post("/<int:post_id>/edit")
@login_required
@require_editor
def posts_edit(post_id: int):
    post = db.session.get(Post, post_id)
    if not post:
        flash("Post not found.", "danger")
        return redirect(url_for("content.posts_list"))

    form = PostForm(obj=post)
    if form.validate_on_submit():
        new_slug = (form.slug.data or "").strip() or post.slug
        existing = Post.query.filter(Post.slug == new_slug, Post.id != post.id).first()
        if existing:
            flash("Another post already uses that slug.", "danger")
            return render_template("content/post_form.html", form=form, mode="edit", post=post)

        post.slug = new_slug
        _apply_form(post, form)
        db.session.commit()
        flash("Post updated.", "success")
        return redirect(url_for("content.posts_list"))

    return render_template("content/post_form.html", form=form, mode="edit", post=post, delete_form=DeleteForm())


@content_bp.post("/<int:post_id>/delete")
@login_required
@require_editor
def posts_delete(post_id: int):
    form = DeleteForm()
    post = db.session.get(Post, post_id)
    if not post or not form.validate_on_submit():
        flash("Post not found.", "danger")
        return redirect(url_for("content.posts_list"))

    db.session.delete(post)
    db.session.commit()
    flash("Post deleted.", "success")
    return redirect(url_for("content.posts_list"))
