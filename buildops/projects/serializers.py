from rest_framework import serializers
from buildops.hr.models import Employee
from .models import Project, ProjectTask, DailyLog


class TeamMemberSerializer(serializers.ModelSerializer):
    class Meta:
        model = Employee
        fields = ['id', 'name', 'role', 'photo_url']


class ProjectSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source='client.name', read_only=True, default=None)
    team = TeamMemberSerializer(many=True, read_only=True)

    class Meta:
        model = Project
        fields = [
            'id', 'name', 'description', 'location', 'budget', 'start_date', 'status',
            'progress', 'client', 'client_name', 'team', 'created_at', 'updated_at'
        ]


class AssignTeamSerializer(serializers.Serializer):
    employee_ids = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.all(), many=True, allow_empty=True)


class ProjectTaskSerializer(serializers.ModelSerializer):
    assignee_name = serializers.CharField(source='assignee.name', read_only=True, default=None)

    class Meta:
        model = ProjectTask
        fields = [
            'id', 'project', 'name', 'description', 'status', 'due_date',
            'assignee', 'assignee_name', 'created_at', 'updated_at'
        ]
        read_only_fields = ['project']


class TaskStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ProjectTask.STATUS_CHOICES)


class DailyLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = DailyLog
        fields = ['id', 'project', 'notes', 'author', 'author_email', 'created_at']
        read_only_fields = ['project', 'author', 'author_email']
