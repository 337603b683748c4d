from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import Group
from django.utils.html import format_html
from django.urls import reverse
from .consistency import repair_answer_links
from .models import User, Tag, Question, Answer, Notification

# ==================== ADMIN CLASSES ====================

@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('username', 'email', 'is_staff', 'is_superuser', 'date_joined')
    search_fields = ('username', 'email')

@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'question_count')
    search_fields = ('name',)

    def question_count(self, obj):
        return obj.questions.count()
    question_count.short_description = 'Questions'

@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ('id', 'title_short', 'author_link', 'answer_count', 'accepted_answer', 'created_at')
    list_filter = ('created_at', 'tags')
    search_fields = ('title', 'description', 'author__username')
    readonly_fields = ('answer_ids', 'accepted_answer', 'created_at', 'updated_at')
    actions = ['repair_links']

    def author_link(self, obj):
        url = reverse("admin:qa_user_change", args=[obj.author.id])
        return format_html('<a href="{}">{}</a>', url, obj.author.username)
    author_link.short_description = 'Author'
    author_link.admin_order_field = 'author__username'

    def title_short(self, obj):
        return obj.title[:60] + '...' if len(obj.title) > 60 else obj.title
    title_short.short_description = 'Title'

    def answer_count(self, obj):
        return len(obj.answer_ids)
    answer_count.short_description = 'Answers'

    def repair_links(self, request, queryset):
        repaired = 0
        for question in queryset:
            report = repair_answer_links(question)
            if any(report.values()):
                repaired += 1
        self.message_user(request, f"{repaired} of {queryset.count()} questions repaired")
    repair_links.short_description = "Repair answer links of selected questions"

    def delete_queryset(self, request, queryset):
        # Answer.question is PROTECT; remove answers with their question
        Answer.objects.filter(question__in=queryset).delete()
        queryset.delete()

    def delete_model(self, request, obj):
        Answer.objects.filter(question=obj).delete()
        obj.delete()

@admin.register(Answer)
class AnswerAdmin(admin.ModelAdmin):
    list_display = ('id', 'content_short', 'author', 'question', 'upvotes', 'downvotes', 'is_accepted', 'created_at')
    list_filter = ('is_accepted', 'created_at')
    search_fields = ('content', 'author__username', 'question__title')
    readonly_fields = ('upvotes', 'downvotes', 'is_accepted')

    def content_short(self, obj):
        return obj.content[:50] + '...' if len(obj.content) > 50 else obj.content
    content_short.short_description = 'Content'

@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'actor', 'message', 'created_at', 'is_read')
    list_filter = ('is_read', 'created_at')
    search_fields = ('user__username', 'actor__username', 'message')

# Unregister Django's default Group
admin.site.unregister(Group)

# Basic admin site configuration
admin.site.site_header = "StackIt Admin"
admin.site.site_title = "StackIt Admin Portal"
admin.site.index_title = "Welcome"
